# AXTRESO/backend/scripts/seed_data.py : script pour générer des données de démo

#!/usr/bin/env python
"""Script pour générer des salons et des transactions réalistes"""

import random
import sys
import os
from datetime import timedelta
from decimal import Decimal
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from axtreso.auth import hash_password
from axtreso.constants import CITIES, DECAISSEMENT_DESIGNATIONS, ENCAISSEMENT_DESIGNATIONS
from axtreso.database import SessionLocal, create_tables, engine
from axtreso.models import models
from axtreso.models.models import utcnow
from axtreso.services.account_service import DEFAULT_NOTIFICATION_SETTINGS

DEMO_PASSWORD = "demo1234"


def generate_test_data(days=90):
    """Génère un gérant et son salon par ville, avec `days` jours d'activité"""
    if engine is None:
        print("❌ DATABASE_URL non définie, rien à générer")
        return

    create_tables()
    db = SessionLocal()
    try:
        for index, city in enumerate(CITIES, start=1):
            manager = models.User(
                email=f"gerant{index}@axtreso.ga",
                password_hash=hash_password(DEMO_PASSWORD),
                name=f"Gérant {city}",
                login_method="email",
                role="manager",
            )
            db.add(manager)
            db.flush()

            salon = models.Salon(
                manager_id=manager.id,
                name=f"Salon Beauté {city}",
                city=city,
                email=manager.email,
                status="active",
            )
            db.add(salon)
            db.flush()
            db.add(models.NotificationSettings(salon_id=salon.id, **DEFAULT_NOTIFICATION_SETTINGS))

            for days_ago in range(days):
                date = utcnow() - timedelta(days=days_ago)

                # 2-6 prestations par jour
                for _ in range(random.randint(2, 6)):
                    db.add(models.Transaction(
                        salon_id=salon.id,
                        type="encaissement",
                        designation=random.choice(ENCAISSEMENT_DESIGNATIONS),
                        amount=Decimal(random.randint(20, 400) * 250),
                        date=date - timedelta(minutes=random.randint(0, 600)),
                    ))

                # Dépenses environ 2 fois par semaine
                if random.random() < 0.3:
                    db.add(models.Transaction(
                        salon_id=salon.id,
                        type="decaissement",
                        designation=random.choice(DECAISSEMENT_DESIGNATIONS),
                        amount=Decimal(random.randint(10, 200) * 500),
                        date=date,
                    ))

            print(f"👤 {manager.email} / {DEMO_PASSWORD} -> {salon.name}")

        db.commit()
        print("✅ Données de démo générées avec succès!")
    finally:
        db.close()


if __name__ == "__main__":
    generate_test_data()
