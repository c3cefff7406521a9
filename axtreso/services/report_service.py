# AXTRESO/backend/axtreso/services/report_service.py : génération et export des rapports

"""
Collaborateurs externes du module rapports.

- ReportGenerator : (store, salon, période, admin) -> colonnes d'un Report.
- ReportExporter : (report, salon, format) -> ExportedArtifact (clé + URL).

Le reste de l'application ne dépend que de ces signatures : un moteur
d'analyse narrative ou de rendu de documents peut être branché sans toucher
à l'autorisation ni aux agrégations.

Les rapports sont des instantanés : les totaux sont figés à la génération
et ne sont jamais recalculés quand les transactions changent ensuite.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict

from axtreso.config import EXPORT_DIR, EXPORT_BASE_URL
from axtreso.constants import EXPORT_FORMATS, MONTHS_FR, TOP_DECAISSEMENTS
from axtreso.models import models
from axtreso.services.analytics_service import (
    breakdown_by_designation,
    momentum,
    salon_timezone,
)
from axtreso.services.store import Store

logger = logging.getLogger(__name__)


def decimal_total(rows, type: str) -> Decimal:
    """Somme exacte des montants décimaux d'un type"""
    return sum((Decimal(row.amount) for row in rows if row.type == type), Decimal("0.00"))


def format_fcfa(value) -> str:
    return f"{Decimal(value):,.2f}".replace(",", " ") + " FCFA"


class ReportGenerator:
    """Interface de génération d'un rapport sur une période"""

    def __call__(self, store: Store, salon: models.Salon, start_date: datetime,
                 end_date: datetime, generated_by: int) -> Dict[str, Any]:
        raise NotImplementedError


class SnapshotReportGenerator(ReportGenerator):
    """Calcule totaux, ventilations et pics ; les textes d'analyse restent vides"""

    def __call__(self, store, salon, start_date, end_date, generated_by):
        rows = store.get_transactions_by_salon(salon.id, start_date=start_date, end_date=end_date)
        total_in = decimal_total(rows, "encaissement")
        total_out = decimal_total(rows, "decaissement")

        logger.info(f"📊 Rapport salon {salon.id}: {len(rows)} transactions du {start_date} au {end_date}")
        return {
            "salon_id": salon.id,
            "generated_by": generated_by,
            "start_date": start_date,
            "end_date": end_date,
            "total_encaissements": total_in,
            "total_decaissements": total_out,
            "final_balance": total_in - total_out,
            "encaissements_breakdown": breakdown_by_designation(rows, "encaissement"),
            "decaissements_breakdown": breakdown_by_designation(rows, "decaissement", top=TOP_DECAISSEMENTS),
            "momentum_data": momentum(rows, salon_timezone(salon)),
        }


@dataclass(frozen=True)
class ExportedArtifact:
    file_key: str
    file_url: str


class ReportExporter:
    """Interface de rendu d'un rapport vers un fichier téléchargeable"""

    def __call__(self, report: models.Report, salon: models.Salon, format: str) -> ExportedArtifact:
        raise NotImplementedError

    def path_for(self, file_key: str) -> Path:
        raise NotImplementedError


class TextReportExporter(ReportExporter):
    """
    Export provisoire : un résumé texte enregistré avec l'extension du format
    demandé, en attendant un vrai moteur PDF / Excel / Word.
    """

    def __init__(self, export_dir: Path = EXPORT_DIR, base_url: str = EXPORT_BASE_URL):
        self.export_dir = Path(export_dir)
        self.base_url = base_url.rstrip("/")

    def path_for(self, file_key: str) -> Path:
        return self.export_dir / file_key

    def render(self, report: models.Report, salon: models.Salon) -> str:
        def fr(moment: datetime) -> str:
            return moment.strftime("%d/%m/%Y")

        lines = [
            "RAPPORT FINANCIER",
            "=================",
            "",
            f"Salon: {salon.name} ({salon.city})",
            f"Période: {fr(report.start_date)} - {fr(report.end_date)}"
            f" ({MONTHS_FR[report.start_date.month - 1]} {report.start_date.year})",
            f"Généré le: {fr(report.created_at)}",
            "",
            "RÉSUMÉ FINANCIER",
            "================",
            f"Total Encaissements: {format_fcfa(report.total_encaissements)}",
            f"Total Décaissements: {format_fcfa(report.total_decaissements)}",
            f"Solde Final: {format_fcfa(report.final_balance)}",
            "",
            "ENCAISSEMENTS PAR DÉSIGNATION",
            "=============================",
        ]
        lines += [f"- {name}: {format_fcfa(amount)}" for name, amount in (report.encaissements_breakdown or {}).items()]
        lines += [
            "",
            "DÉCAISSEMENTS PRINCIPAUX",
            "========================",
        ]
        lines += [f"- {name}: {format_fcfa(amount)}" for name, amount in (report.decaissements_breakdown or {}).items()]

        peaks = report.momentum_data or {}
        lines += ["", "PICS D'ACTIVITÉ", "==============="]
        for label, key in (("Encaissements", "encaissements_peak"), ("Décaissements", "decaissements_peak")):
            peak = peaks.get(key)
            if peak:
                lines.append(f"{label}: {peak['date']} ({format_fcfa(peak['amount'])})")
            else:
                lines.append(f"{label}: aucune activité")

        lines += [
            "",
            "ANALYSE",
            "=======",
            f"Encaissements: {report.encaissements_interpretation or 'À générer'}",
            f"Décaissements: {report.decaissements_interpretation or 'À générer'}",
            f"Dynamique: {report.momentum_interpretation or 'À générer'}",
            f"Recommandations: {report.personalized_advice or 'À générer'}",
        ]
        if report.admin_comments:
            lines += ["", f"Commentaires: {report.admin_comments}"]
        return "\n".join(lines) + "\n"

    def __call__(self, report, salon, format):
        extension = EXPORT_FORMATS[format]
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
        file_key = f"salon-{report.salon_id}/rapport-{report.id}-{stamp}.{extension}"

        path = self.path_for(file_key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(report, salon), encoding="utf-8")

        logger.info(f"✅ Rapport {report.id} exporté en {format}: {path}")
        return ExportedArtifact(file_key=file_key, file_url=f"{self.base_url}/{file_key}")


def get_report_generator() -> ReportGenerator:
    """Dépendance FastAPI : stratégie de génération des rapports"""
    return SnapshotReportGenerator()


def get_report_exporter() -> ReportExporter:
    """Dépendance FastAPI : stratégie d'export des rapports"""
    return TextReportExporter()
