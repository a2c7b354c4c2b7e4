from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

ServiceCategory = Literal["property", "tech", "business", "finance", "consulting"]


class ApiModel(BaseModel):
    """JSON 统一使用 camelCase，请求体同时接受 snake_case"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class OrderedPayload(ApiModel):
    # 与前端一致：order 缺省或 null 时为 0，isActive 缺省或 null 时为 true
    order: Optional[int] = 0
    is_active: Optional[bool] = True

    @field_validator("order", mode="after")
    @classmethod
    def _default_order(cls, v):
        return v or 0

    @field_validator("is_active", mode="after")
    @classmethod
    def _default_active(cls, v):
        return True if v is None else v


# ===== Company =====

class CompanyFeatureIn(ApiModel):
    title: str = Field(min_length=1, max_length=255)
    order: Optional[int] = None


class CompanyServiceIn(ApiModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    order: Optional[int] = None


class CompanyIn(OrderedPayload):
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(pattern=SLUG_PATTERN, max_length=255)
    description: str = Field(min_length=1)
    icon: Optional[str] = None
    image_url: Optional[str] = None
    color: Optional[str] = None
    features: Optional[List[CompanyFeatureIn]] = None
    services: Optional[List[CompanyServiceIn]] = None


class CompanyFeatureOut(ApiModel):
    id: str
    title: str
    order: int


class CompanyServiceOut(ApiModel):
    id: str
    title: str
    description: Optional[str] = None
    order: int


class CompanyOut(ApiModel):
    id: str
    name: str
    slug: str
    description: str
    icon: Optional[str] = None
    image_url: Optional[str] = None
    color: Optional[str] = None
    is_active: bool
    order: int
    features: List[CompanyFeatureOut] = []
    services: List[CompanyServiceOut] = []
    created_at: datetime
    updated_at: datetime


# ===== Statistic =====

class StatisticIn(OrderedPayload):
    label: str = Field(min_length=1, max_length=255)
    value: str = Field(min_length=1, max_length=100)
    icon: Optional[str] = None
    image_url: Optional[str] = None


class StatisticOut(ApiModel):
    id: str
    label: str
    value: str
    icon: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool
    order: int
    created_at: datetime
    updated_at: datetime


# ===== Testimonial =====

class TestimonialIn(OrderedPayload):
    name: str = Field(min_length=1, max_length=255)
    company: Optional[str] = None
    role: Optional[str] = None
    content: str = Field(min_length=1)
    rating: Optional[int] = Field(default=5, ge=1, le=5)

    @field_validator("rating", mode="after")
    @classmethod
    def _default_rating(cls, v):
        return v or 5


class TestimonialOut(ApiModel):
    id: str
    name: str
    company: Optional[str] = None
    role: Optional[str] = None
    content: str
    rating: int
    is_active: bool
    order: int
    created_at: datetime
    updated_at: datetime


# ===== Service =====

class ServiceIn(OrderedPayload):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    category: ServiceCategory = "property"
    icon: Optional[str] = None
    image_url: Optional[str] = None


class ServiceOut(ApiModel):
    id: str
    title: str
    description: str
    category: str
    icon: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool
    order: int
    created_at: datetime
    updated_at: datetime


# ===== Contact =====

class ContactRequest(ApiModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    company: Optional[str] = None
    message: str = Field(min_length=1)


class ContactUpdate(ApiModel):
    # 只允许修改已读标记，其它字段一律忽略
    is_read: bool


class ContactMessageOut(ApiModel):
    id: str
    name: str
    email: str
    company: Optional[str] = None
    message: str
    is_read: bool
    created_at: datetime
    updated_at: datetime


class ContactAccepted(ApiModel):
    message: str
    id: str


# ===== Website section =====

class SectionIn(OrderedPayload):
    title: str = Field(min_length=1, max_length=255)
    subtitle: Optional[str] = None
    content: Optional[str] = None
    type: str = Field(default="content", min_length=1, max_length=50)


class SectionOut(ApiModel):
    id: str
    title: str
    subtitle: Optional[str] = None
    content: Optional[str] = None
    type: str
    is_active: bool
    order: int
    created_at: datetime
    updated_at: datetime


# ===== Admin / public =====

class LoginRequest(ApiModel):
    # 密码原样比对，不去空格
    model_config = ConfigDict(str_strip_whitespace=False)

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class DashboardCounts(ApiModel):
    companies: int
    statistics: int
    testimonials: int
    services: int
    messages: int
    unread_messages: int


class UploadResult(ApiModel):
    image_url: str


class PublicCompany(CompanyOut):
    optimized_image_url: str = ""


class PublicStatistic(StatisticOut):
    optimized_image_url: str = ""


class PublicService(ServiceOut):
    optimized_image_url: str = ""


class HomePublic(ApiModel):
    companies: List[PublicCompany]
    statistics: List[PublicStatistic]
    testimonials: List[TestimonialOut]
    services: List[PublicService]
    sections: List[SectionOut]
