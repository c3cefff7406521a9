# AXTRESO/backend/axtreso/constants.py

from datetime import timedelta, timezone

# Constantes pour l'application
MONTHS_FR = [
    "Janvier", "Février", "Mars", "Avril", "Mai", "Juin",
    "Juillet", "Août", "Septembre", "Octobre", "Novembre", "Décembre"
]

CITIES = ["Libreville", "Brazzaville"]

# Libreville et Brazzaville sont à l'heure d'Afrique de l'Ouest, sans heure d'été
WAT = timezone(timedelta(hours=1), "WAT")
CITY_TIMEZONES = {
    "Libreville": WAT,
    "Brazzaville": WAT,
}

EXPORT_FORMATS = {
    "pdf": "pdf",
    "excel": "xlsx",
    "word": "docx",
}

# Désignations proposées dans les formulaires (la saisie reste libre)
ENCAISSEMENT_DESIGNATIONS = [
    "Pose perruque", "Tissage", "Coiffure", "Maquillage",
    "Manucure", "Vente produits", "Autre",
]
DECAISSEMENT_DESIGNATIONS = [
    "Achat produits", "Salaires", "Loyer", "Électricité",
    "Eau", "Transport", "Maintenance", "Autre",
]

# Seuils et limites
MANAGER_TREND_DAYS = 11  # 10 derniers jours + aujourd'hui
SALON_TREND_DAYS = 30
TOP_DECAISSEMENTS = 10
MIN_PASSWORD_LENGTH = 8
