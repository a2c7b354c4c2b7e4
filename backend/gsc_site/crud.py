"""
数据库 CRUD 操作
"""
from typing import Iterable, List, Optional, Type

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from .db import transactional
from .models import (
    Company,
    CompanyFeature,
    CompanyService,
    ContactMessage,
    Service,
    Statistic,
    Testimonial,
    WebsiteSection,
)
from .schemas import (
    CompanyFeatureIn,
    CompanyIn,
    CompanyServiceIn,
    ContactRequest,
    SectionIn,
    ServiceIn,
    StatisticIn,
    TestimonialIn,
)


def _ordered_query(db: Session, model: Type, include_inactive: bool):
    query = db.query(model)
    if not include_inactive:
        query = query.filter(model.is_active.is_(True))
    # 同一 order 按创建先后排列
    return query.order_by(model.order.asc(), model.created_at.asc())


def get_item(db: Session, model: Type, item_id: str):
    return db.query(model).filter(model.id == item_id).first()


def delete_item(db: Session, model: Type, item_id: str) -> bool:
    item = get_item(db, model, item_id)
    if not item:
        return False
    with transactional(db):
        db.delete(item)
    return True


def _apply_fields(item, values: dict) -> None:
    for k, v in values.items():
        setattr(item, k, v)


def _create(db: Session, item):
    with transactional(db):
        db.add(item)
    db.refresh(item)
    return item


def _update(db: Session, model: Type, item_id: str, values: dict):
    item = get_item(db, model, item_id)
    if not item:
        return None
    with transactional(db):
        _apply_fields(item, values)
    db.refresh(item)
    return item


# ===== Company =====

def _build_features(items: Optional[Iterable[CompanyFeatureIn]]) -> List[CompanyFeature]:
    return [
        CompanyFeature(title=f.title, order=f.order if f.order is not None else index)
        for index, f in enumerate(items or [])
    ]


def _build_company_services(items: Optional[Iterable[CompanyServiceIn]]) -> List[CompanyService]:
    return [
        CompanyService(
            title=s.title,
            description=s.description,
            order=s.order if s.order is not None else index,
        )
        for index, s in enumerate(items or [])
    ]


def _company_scalars(payload: CompanyIn) -> dict:
    return payload.model_dump(exclude={"features", "services"})


def list_companies(db: Session, include_inactive: bool = False) -> List[Company]:
    return (
        _ordered_query(db, Company, include_inactive)
        .options(selectinload(Company.features), selectinload(Company.services))
        .all()
    )


def get_company(db: Session, company_id: str) -> Optional[Company]:
    return (
        db.query(Company)
        .options(selectinload(Company.features), selectinload(Company.services))
        .filter(Company.id == company_id)
        .first()
    )


def create_company(db: Session, payload: CompanyIn) -> Company:
    company = Company(**_company_scalars(payload))
    company.features = _build_features(payload.features)
    company.services = _build_company_services(payload.services)
    return _create(db, company)


def update_company(db: Session, company_id: str, payload: CompanyIn) -> Optional[Company]:
    """
    整体替换公司信息。
    features/services 先全部删除再按请求重建，与标量字段在同一事务内提交。
    """
    company = get_company(db, company_id)
    if not company:
        return None
    with transactional(db):
        _apply_fields(company, _company_scalars(payload))
        # delete-orphan：旧的子记录在 flush 时删除
        company.features = _build_features(payload.features)
        company.services = _build_company_services(payload.services)
    db.refresh(company)
    return company


def delete_company(db: Session, company_id: str) -> bool:
    return delete_item(db, Company, company_id)


# ===== Statistic =====

def list_statistics(db: Session, include_inactive: bool = False) -> List[Statistic]:
    return _ordered_query(db, Statistic, include_inactive).all()


def create_statistic(db: Session, payload: StatisticIn) -> Statistic:
    return _create(db, Statistic(**payload.model_dump()))


def update_statistic(db: Session, statistic_id: str, payload: StatisticIn) -> Optional[Statistic]:
    return _update(db, Statistic, statistic_id, payload.model_dump())


# ===== Testimonial =====

def list_testimonials(db: Session, include_inactive: bool = False) -> List[Testimonial]:
    return _ordered_query(db, Testimonial, include_inactive).all()


def create_testimonial(db: Session, payload: TestimonialIn) -> Testimonial:
    return _create(db, Testimonial(**payload.model_dump()))


def update_testimonial(db: Session, testimonial_id: str, payload: TestimonialIn) -> Optional[Testimonial]:
    return _update(db, Testimonial, testimonial_id, payload.model_dump())


# ===== Service =====

def list_services(db: Session, include_inactive: bool = False) -> List[Service]:
    return _ordered_query(db, Service, include_inactive).all()


def create_service(db: Session, payload: ServiceIn) -> Service:
    return _create(db, Service(**payload.model_dump()))


def update_service(db: Session, service_id: str, payload: ServiceIn) -> Optional[Service]:
    return _update(db, Service, service_id, payload.model_dump())


# ===== Website section =====

def list_sections(db: Session, include_inactive: bool = False) -> List[WebsiteSection]:
    return _ordered_query(db, WebsiteSection, include_inactive).all()


def create_section(db: Session, payload: SectionIn) -> WebsiteSection:
    return _create(db, WebsiteSection(**payload.model_dump()))


def update_section(db: Session, section_id: str, payload: SectionIn) -> Optional[WebsiteSection]:
    return _update(db, WebsiteSection, section_id, payload.model_dump())


# ===== Contact message =====

def list_messages(db: Session, unread_only: bool = False, limit: Optional[int] = None) -> List[ContactMessage]:
    query = db.query(ContactMessage)
    if unread_only:
        query = query.filter(ContactMessage.is_read.is_(False))
    query = query.order_by(ContactMessage.created_at.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def create_message(db: Session, payload: ContactRequest) -> ContactMessage:
    return _create(db, ContactMessage(**payload.model_dump(), is_read=False))


def set_message_read(db: Session, message_id: str, is_read: bool) -> Optional[ContactMessage]:
    return _update(db, ContactMessage, message_id, {"is_read": is_read})


# ===== Dashboard =====

def count_content(db: Session) -> dict:
    """后台首页统计（包含未启用的记录）"""
    counts = {
        "companies": db.query(func.count(Company.id)).scalar() or 0,
        "statistics": db.query(func.count(Statistic.id)).scalar() or 0,
        "testimonials": db.query(func.count(Testimonial.id)).scalar() or 0,
        "services": db.query(func.count(Service.id)).scalar() or 0,
        "messages": db.query(func.count(ContactMessage.id)).scalar() or 0,
    }
    counts["unread_messages"] = (
        db.query(func.count(ContactMessage.id))
        .filter(ContactMessage.is_read.is_(False))
        .scalar()
        or 0
    )
    return counts
