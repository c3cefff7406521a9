# AXTRESO/backend/axtreso/routes/reports.py

import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse

from axtreso import auth
from axtreso.errors import BadRequest, NotFound
from axtreso.models import models as db_models
from axtreso.schemas import schemas
from axtreso.services.report_service import (
    ReportExporter,
    ReportGenerator,
    get_report_exporter,
    get_report_generator,
)
from axtreso.services.store import Store, get_store

router = APIRouter(prefix="/api/report", tags=["report"])
logger = logging.getLogger(__name__)


def _readable_report(store: Store, user: db_models.User, report_id: int) -> db_models.Report:
    report = store.get_report_by_id(report_id)
    if not report:
        raise NotFound("Rapport introuvable")
    auth.authorize_salon(store, user, report.salon_id)
    return report


@router.post("/generate", response_model=schemas.ReportOut)
def generate_report(
    payload: schemas.ReportGenerateIn,
    store: Store = Depends(get_store),
    generator: ReportGenerator = Depends(get_report_generator),
    current_user: db_models.User = Depends(auth.require_admin)
):
    """Génère un rapport figé pour un salon sur une période"""
    if payload.start_date > payload.end_date:
        raise BadRequest("La date de début doit précéder la date de fin")

    salon = auth.authorize_salon(store, current_user, payload.salon_id)
    report = store.create_report(
        **generator(store, salon, payload.start_date, payload.end_date, current_user.id)
    )
    store.create_audit_log(
        current_user.id,
        "report_generated",
        salon_id=salon.id,
        details={"report_id": report.id},
    )
    return report


@router.get("/getReportsBySalon", response_model=List[schemas.ReportOut])
def get_reports_by_salon(
    salon_id: int = Query(...),
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    auth.authorize_salon(store, current_user, salon_id)
    return store.get_reports_by_salon(salon_id)


@router.get("/getReportById", response_model=schemas.ReportOut)
def get_report_by_id(
    report_id: int = Query(...),
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    return _readable_report(store, current_user, report_id)


@router.post("/update", response_model=schemas.ReportOut)
def update_report(
    payload: schemas.ReportUpdateIn,
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.require_admin)
):
    """Seuls les conseils et commentaires restent modifiables après génération"""
    report = store.update_report(
        payload.report_id,
        **payload.model_dump(exclude={"report_id"}, exclude_unset=True)
    )
    if not report:
        raise NotFound("Rapport introuvable")
    return report


@router.post("/deleteReport", response_model=schemas.SuccessOut)
def delete_report(
    payload: schemas.ReportIdIn,
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.require_admin)
):
    report = store.get_report_by_id(payload.report_id)
    if not report:
        raise NotFound("Rapport introuvable")

    salon_id = report.salon_id
    store.delete_report(payload.report_id)
    store.create_audit_log(
        current_user.id,
        "report_deleted",
        salon_id=salon_id,
        details={"report_id": payload.report_id},
    )
    return {"success": True}


# ========== EXPORTS ==========

@router.post("/export", response_model=schemas.ReportExportOut)
def export_report(
    payload: schemas.ReportExportIn,
    store: Store = Depends(get_store),
    exporter: ReportExporter = Depends(get_report_exporter),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Produit un fichier téléchargeable et en garde la trace"""
    report = _readable_report(store, current_user, payload.report_id)
    salon = store.get_salon_by_id(report.salon_id)

    artifact = exporter(report, salon, payload.format)
    return store.create_report_export(
        report_id=report.id,
        format=payload.format,
        file_url=artifact.file_url,
        file_key=artifact.file_key,
    )


@router.get("/getExports", response_model=List[schemas.ReportExportOut])
def get_exports(
    report_id: int = Query(...),
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    _readable_report(store, current_user, report_id)
    return store.get_report_exports_by_report(report_id)


@router.get("/download/{file_key:path}")
def download_export(
    file_key: str,
    store: Store = Depends(get_store),
    exporter: ReportExporter = Depends(get_report_exporter),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    # Seules les clés enregistrées en base sont servies
    export = store.get_report_export_by_key(file_key)
    if not export:
        raise NotFound("Export introuvable")
    _readable_report(store, current_user, export.report_id)

    path = exporter.path_for(export.file_key)
    if not path.is_file():
        logger.warning(f"⚠️ Fichier d'export manquant: {path}")
        raise NotFound("Fichier d'export introuvable")
    return FileResponse(path, filename=path.name)
