"""
内容管理 REST 接口：公司、统计数字、客户评价、服务、留言、页面区块、图片上传
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud
from .auth import is_logged_in, require_admin
from .db import get_db
from .media import UploadError, UploadValidationError, upload_image, validate_image
from .models import ContactMessage, Service, Statistic, Testimonial, WebsiteSection
from .schemas import (
    CompanyIn,
    CompanyOut,
    ContactAccepted,
    ContactMessageOut,
    ContactRequest,
    ContactUpdate,
    SectionIn,
    SectionOut,
    ServiceIn,
    ServiceOut,
    StatisticIn,
    StatisticOut,
    TestimonialIn,
    TestimonialOut,
    UploadResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

admin_only = [Depends(require_admin)]


def _include_inactive(request: Request, include_inactive: bool) -> bool:
    """未启用的记录只对已登录的后台可见"""
    if include_inactive and not is_logged_in(request):
        raise HTTPException(status_code=401, detail="Unauthorized")
    return include_inactive


def _failed(action: str, e: Exception) -> HTTPException:
    logger.error(f"Error {action}: {e}", exc_info=True)
    return HTTPException(status_code=500, detail=f"Failed to {action}")


def _found(item, entity: str):
    if not item:
        raise HTTPException(status_code=404, detail=f"{entity} not found")
    return item


def _deleted(ok: bool, entity: str) -> dict:
    if not ok:
        raise HTTPException(status_code=404, detail=f"{entity} not found")
    return {"message": f"{entity} deleted successfully"}


# ===== Companies =====

@router.get("/companies", response_model=List[CompanyOut])
def list_companies(request: Request, include_inactive: bool = False, db: Session = Depends(get_db)):
    show_all = _include_inactive(request, include_inactive)
    try:
        return crud.list_companies(db, include_inactive=show_all)
    except SQLAlchemyError as e:
        raise _failed("fetch companies", e)


@router.post("/companies", response_model=CompanyOut, status_code=201, dependencies=admin_only)
def create_company(payload: CompanyIn, db: Session = Depends(get_db)):
    try:
        return crud.create_company(db, payload)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Slug already exists")
    except SQLAlchemyError as e:
        raise _failed("create company", e)


@router.get("/companies/{company_id}", response_model=CompanyOut)
def get_company(company_id: str, db: Session = Depends(get_db)):
    try:
        company = crud.get_company(db, company_id)
    except SQLAlchemyError as e:
        raise _failed("fetch company", e)
    return _found(company, "Company")


@router.put("/companies/{company_id}", response_model=CompanyOut, dependencies=admin_only)
def update_company(company_id: str, payload: CompanyIn, db: Session = Depends(get_db)):
    try:
        company = crud.update_company(db, company_id, payload)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Slug already exists")
    except SQLAlchemyError as e:
        raise _failed("update company", e)
    return _found(company, "Company")


@router.delete("/companies/{company_id}", dependencies=admin_only)
def delete_company(company_id: str, db: Session = Depends(get_db)):
    try:
        ok = crud.delete_company(db, company_id)
    except SQLAlchemyError as e:
        raise _failed("delete company", e)
    return _deleted(ok, "Company")


# ===== Statistics =====

@router.get("/statistics", response_model=List[StatisticOut])
def list_statistics(request: Request, include_inactive: bool = False, db: Session = Depends(get_db)):
    show_all = _include_inactive(request, include_inactive)
    try:
        return crud.list_statistics(db, include_inactive=show_all)
    except SQLAlchemyError as e:
        raise _failed("fetch statistics", e)


@router.post("/statistics", response_model=StatisticOut, status_code=201, dependencies=admin_only)
def create_statistic(payload: StatisticIn, db: Session = Depends(get_db)):
    try:
        return crud.create_statistic(db, payload)
    except SQLAlchemyError as e:
        raise _failed("create statistic", e)


@router.get("/statistics/{statistic_id}", response_model=StatisticOut)
def get_statistic(statistic_id: str, db: Session = Depends(get_db)):
    try:
        item = crud.get_item(db, Statistic, statistic_id)
    except SQLAlchemyError as e:
        raise _failed("fetch statistic", e)
    return _found(item, "Statistic")


@router.put("/statistics/{statistic_id}", response_model=StatisticOut, dependencies=admin_only)
def update_statistic(statistic_id: str, payload: StatisticIn, db: Session = Depends(get_db)):
    try:
        item = crud.update_statistic(db, statistic_id, payload)
    except SQLAlchemyError as e:
        raise _failed("update statistic", e)
    return _found(item, "Statistic")


@router.delete("/statistics/{statistic_id}", dependencies=admin_only)
def delete_statistic(statistic_id: str, db: Session = Depends(get_db)):
    try:
        ok = crud.delete_item(db, Statistic, statistic_id)
    except SQLAlchemyError as e:
        raise _failed("delete statistic", e)
    return _deleted(ok, "Statistic")


# ===== Testimonials =====

@router.get("/testimonials", response_model=List[TestimonialOut])
def list_testimonials(request: Request, include_inactive: bool = False, db: Session = Depends(get_db)):
    show_all = _include_inactive(request, include_inactive)
    try:
        return crud.list_testimonials(db, include_inactive=show_all)
    except SQLAlchemyError as e:
        raise _failed("fetch testimonials", e)


@router.post("/testimonials", response_model=TestimonialOut, status_code=201, dependencies=admin_only)
def create_testimonial(payload: TestimonialIn, db: Session = Depends(get_db)):
    try:
        return crud.create_testimonial(db, payload)
    except SQLAlchemyError as e:
        raise _failed("create testimonial", e)


@router.get("/testimonials/{testimonial_id}", response_model=TestimonialOut)
def get_testimonial(testimonial_id: str, db: Session = Depends(get_db)):
    try:
        item = crud.get_item(db, Testimonial, testimonial_id)
    except SQLAlchemyError as e:
        raise _failed("fetch testimonial", e)
    return _found(item, "Testimonial")


@router.put("/testimonials/{testimonial_id}", response_model=TestimonialOut, dependencies=admin_only)
def update_testimonial(testimonial_id: str, payload: TestimonialIn, db: Session = Depends(get_db)):
    try:
        item = crud.update_testimonial(db, testimonial_id, payload)
    except SQLAlchemyError as e:
        raise _failed("update testimonial", e)
    return _found(item, "Testimonial")


@router.delete("/testimonials/{testimonial_id}", dependencies=admin_only)
def delete_testimonial(testimonial_id: str, db: Session = Depends(get_db)):
    try:
        ok = crud.delete_item(db, Testimonial, testimonial_id)
    except SQLAlchemyError as e:
        raise _failed("delete testimonial", e)
    return _deleted(ok, "Testimonial")


# ===== Services =====

@router.get("/services", response_model=List[ServiceOut])
def list_services(request: Request, include_inactive: bool = False, db: Session = Depends(get_db)):
    show_all = _include_inactive(request, include_inactive)
    try:
        return crud.list_services(db, include_inactive=show_all)
    except SQLAlchemyError as e:
        raise _failed("fetch services", e)


@router.post("/services", response_model=ServiceOut, status_code=201, dependencies=admin_only)
def create_service(payload: ServiceIn, db: Session = Depends(get_db)):
    try:
        return crud.create_service(db, payload)
    except SQLAlchemyError as e:
        raise _failed("create service", e)


@router.get("/services/{service_id}", response_model=ServiceOut)
def get_service(service_id: str, db: Session = Depends(get_db)):
    try:
        item = crud.get_item(db, Service, service_id)
    except SQLAlchemyError as e:
        raise _failed("fetch service", e)
    return _found(item, "Service")


@router.put("/services/{service_id}", response_model=ServiceOut, dependencies=admin_only)
def update_service(service_id: str, payload: ServiceIn, db: Session = Depends(get_db)):
    try:
        item = crud.update_service(db, service_id, payload)
    except SQLAlchemyError as e:
        raise _failed("update service", e)
    return _found(item, "Service")


@router.delete("/services/{service_id}", dependencies=admin_only)
def delete_service(service_id: str, db: Session = Depends(get_db)):
    try:
        ok = crud.delete_item(db, Service, service_id)
    except SQLAlchemyError as e:
        raise _failed("delete service", e)
    return _deleted(ok, "Service")


# ===== Contact messages =====

@router.post("/contact", response_model=ContactAccepted, status_code=201)
def submit_contact(payload: ContactRequest, db: Session = Depends(get_db)):
    """联系表单：保存留言，后台查看"""
    try:
        item = crud.create_message(db, payload)
    except SQLAlchemyError as e:
        raise _failed("submit contact form", e)
    return ContactAccepted(message="Contact form submitted successfully", id=item.id)


@router.get("/contact", response_model=List[ContactMessageOut], dependencies=admin_only)
def list_messages(unread: bool = False, db: Session = Depends(get_db)):
    try:
        return crud.list_messages(db, unread_only=unread)
    except SQLAlchemyError as e:
        raise _failed("fetch contact messages", e)


@router.get("/contact/{message_id}", response_model=ContactMessageOut, dependencies=admin_only)
def get_message(message_id: str, db: Session = Depends(get_db)):
    try:
        item = crud.get_item(db, ContactMessage, message_id)
    except SQLAlchemyError as e:
        raise _failed("fetch contact message", e)
    return _found(item, "Contact message")


@router.put("/contact/{message_id}", response_model=ContactMessageOut, dependencies=admin_only)
def update_message(message_id: str, payload: ContactUpdate, db: Session = Depends(get_db)):
    try:
        item = crud.set_message_read(db, message_id, payload.is_read)
    except SQLAlchemyError as e:
        raise _failed("update contact message", e)
    return _found(item, "Contact message")


@router.delete("/contact/{message_id}", dependencies=admin_only)
def delete_message(message_id: str, db: Session = Depends(get_db)):
    try:
        ok = crud.delete_item(db, ContactMessage, message_id)
    except SQLAlchemyError as e:
        raise _failed("delete contact message", e)
    return _deleted(ok, "Contact message")


# ===== Website sections =====

@router.get("/sections", response_model=List[SectionOut])
def list_sections(request: Request, include_inactive: bool = False, db: Session = Depends(get_db)):
    show_all = _include_inactive(request, include_inactive)
    try:
        return crud.list_sections(db, include_inactive=show_all)
    except SQLAlchemyError as e:
        raise _failed("fetch sections", e)


@router.post("/sections", response_model=SectionOut, status_code=201, dependencies=admin_only)
def create_section(payload: SectionIn, db: Session = Depends(get_db)):
    try:
        return crud.create_section(db, payload)
    except SQLAlchemyError as e:
        raise _failed("create section", e)


@router.get("/sections/{section_id}", response_model=SectionOut)
def get_section(section_id: str, db: Session = Depends(get_db)):
    try:
        item = crud.get_item(db, WebsiteSection, section_id)
    except SQLAlchemyError as e:
        raise _failed("fetch section", e)
    return _found(item, "Section")


@router.put("/sections/{section_id}", response_model=SectionOut, dependencies=admin_only)
def update_section(section_id: str, payload: SectionIn, db: Session = Depends(get_db)):
    try:
        item = crud.update_section(db, section_id, payload)
    except SQLAlchemyError as e:
        raise _failed("update section", e)
    return _found(item, "Section")


@router.delete("/sections/{section_id}", dependencies=admin_only)
def delete_section(section_id: str, db: Session = Depends(get_db)):
    try:
        ok = crud.delete_item(db, WebsiteSection, section_id)
    except SQLAlchemyError as e:
        raise _failed("delete section", e)
    return _deleted(ok, "Section")


# ===== Upload =====

@router.post("/upload", response_model=UploadResult, dependencies=admin_only)
def upload(file: Optional[UploadFile] = File(None)):
    """图片上传：校验后转发到 Cloudinary，返回图片地址"""
    if not file or not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    try:
        # 先按声明的大小和类型拒绝，不读入内存
        if file.size is not None:
            validate_image(file.content_type, file.size)
        content = file.file.read()
        image_url = upload_image(content, file.content_type or "")
    except UploadValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UploadError as e:
        logger.error(f"Error uploading file to Cloudinary: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to upload file")
    return UploadResult(image_url=image_url)
