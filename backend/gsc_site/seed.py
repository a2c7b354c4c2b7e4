"""
初始数据：python -m gsc_site.seed
已存在的数据不会重复写入（公司按 slug，其它表为空时才写入）
"""
import logging

from sqlalchemy.orm import Session

from . import crud
from .auth import ADMIN_EMAIL
from .db import SessionLocal, init_db, transactional
from .models import Company, Service, Statistic, Testimonial, User
from .schemas import CompanyIn, ServiceIn, StatisticIn, TestimonialIn

logger = logging.getLogger(__name__)

COMPANIES = [
    {
        "name": "Roomy Finder",
        "slug": "roomy-finder",
        "description": "Find your perfect living space with our intelligent property matching platform",
        "icon": "Home",
        "color": "from-blue-600 to-cyan-600",
        "order": 0,
        "features": [
            {"title": "AI-powered recommendations"},
            {"title": "Virtual tours"},
            {"title": "Price comparisons"},
            {"title": "Neighborhood insights"},
        ],
        "services": [
            {"title": "Property Search", "description": "Advanced search algorithms"},
            {"title": "Virtual Tours", "description": "360-degree property viewing"},
        ],
    },
    {
        "name": "IT Solutions",
        "slug": "it-solutions",
        "description": "Cutting-edge technology solutions to transform your business operations",
        "icon": "Laptop",
        "color": "from-purple-600 to-pink-600",
        "order": 1,
        "features": [
            {"title": "Cloud infrastructure"},
            {"title": "Cybersecurity"},
            {"title": "Software development"},
            {"title": "IT consulting"},
        ],
        "services": [
            {"title": "Cloud Migration", "description": "Seamless cloud transition"},
            {"title": "Security Audit", "description": "Comprehensive security assessment"},
        ],
    },
    {
        "name": "Real Estate",
        "slug": "real-estate",
        "description": "Premium real estate services for residential and commercial properties",
        "icon": "Building2",
        "color": "from-green-600 to-emerald-600",
        "order": 2,
        "features": [
            {"title": "Property management"},
            {"title": "Investment analysis"},
            {"title": "Market research"},
            {"title": "Legal support"},
        ],
        "services": [
            {"title": "Property Sales", "description": "Residential and commercial"},
            {"title": "Market Analysis", "description": "Real-time market insights"},
        ],
    },
    {
        "name": "Consulting",
        "slug": "consulting",
        "description": "Strategic business consulting to drive growth and innovation",
        "icon": "Users",
        "color": "from-orange-600 to-red-600",
        "order": 3,
        "features": [
            {"title": "Business strategy"},
            {"title": "Process optimization"},
            {"title": "Change management"},
            {"title": "Risk assessment"},
        ],
        "services": [
            {"title": "Strategy Planning", "description": "Long-term business strategy"},
            {"title": "Process Improvement", "description": "Operational excellence"},
        ],
    },
    {
        "name": "Investment",
        "slug": "investment",
        "description": "Smart investment opportunities with expert guidance and analysis",
        "icon": "TrendingUp",
        "color": "from-indigo-600 to-blue-600",
        "order": 4,
        "features": [
            {"title": "Portfolio management"},
            {"title": "Risk analysis"},
            {"title": "Market insights"},
            {"title": "Wealth planning"},
        ],
        "services": [
            {"title": "Portfolio Management", "description": "Diversified investment strategies"},
            {"title": "Risk Assessment", "description": "Comprehensive risk analysis"},
        ],
    },
]

STATISTICS = [
    {"label": "Properties Managed", "value": "10,000+", "icon": "Building2", "order": 0},
    {"label": "IT Projects Completed", "value": "500+", "icon": "Laptop", "order": 1},
    {"label": "Consulting Clients", "value": "1,000+", "icon": "Users", "order": 2},
    {"label": "Investment Portfolio", "value": "$500M+", "icon": "TrendingUp", "order": 3},
]

TESTIMONIALS = [
    {
        "name": "Sarah Johnson",
        "company": "Tech Innovations Inc.",
        "role": "CEO",
        "content": "GSC Capital Group transformed our business with their comprehensive IT solutions and strategic consulting.",
        "rating": 5,
        "order": 0,
    },
    {
        "name": "Michael Chen",
        "company": "Global Properties Ltd.",
        "role": "Managing Director",
        "content": "Their real estate expertise helped us find the perfect commercial space for our expansion.",
        "rating": 5,
        "order": 1,
    },
    {
        "name": "Emily Rodriguez",
        "company": "StartUp Ventures",
        "role": "Founder",
        "content": "The investment guidance from GSC Capital Group has been invaluable for our growth strategy.",
        "rating": 5,
        "order": 2,
    },
]

SERVICES = [
    {
        "title": "Property Search & Discovery",
        "description": "Advanced algorithms to match you with perfect properties",
        "category": "property",
        "icon": "Search",
        "order": 0,
    },
    {
        "title": "Cybersecurity Solutions",
        "description": "Protect your business with enterprise-grade security",
        "category": "tech",
        "icon": "Shield",
        "order": 1,
    },
    {
        "title": "Market Analysis",
        "description": "Data-driven insights for informed decision making",
        "category": "business",
        "icon": "BarChart3",
        "order": 2,
    },
    {
        "title": "Strategic Planning",
        "description": "Custom strategies for sustainable business growth",
        "category": "consulting",
        "icon": "Lightbulb",
        "order": 3,
    },
]


def _is_empty(db: Session, model) -> bool:
    return db.query(model.id).first() is None


def seed(db: Session) -> dict:
    """写入示例数据，返回各表新增条数"""
    created = {"companies": 0, "statistics": 0, "testimonials": 0, "services": 0, "users": 0}

    existing_slugs = {slug for (slug,) in db.query(Company.slug).all()}
    for data in COMPANIES:
        if data["slug"] in existing_slugs:
            continue
        crud.create_company(db, CompanyIn.model_validate(data))
        created["companies"] += 1

    if _is_empty(db, Statistic):
        for data in STATISTICS:
            crud.create_statistic(db, StatisticIn.model_validate(data))
            created["statistics"] += 1

    if _is_empty(db, Testimonial):
        for data in TESTIMONIALS:
            crud.create_testimonial(db, TestimonialIn.model_validate(data))
            created["testimonials"] += 1

    if _is_empty(db, Service):
        for data in SERVICES:
            crud.create_service(db, ServiceIn.model_validate(data))
            created["services"] += 1

    if not db.query(User).filter(User.email == ADMIN_EMAIL).first():
        with transactional(db):
            db.add(User(email=ADMIN_EMAIL, name="Admin User", role="admin"))
        created["users"] += 1

    return created


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        created = seed(db)
    finally:
        db.close()
    logger.info(f"Database seeded successfully: {created}")


if __name__ == "__main__":
    main()
