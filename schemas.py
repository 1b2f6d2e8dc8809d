from pydantic import BaseModel, EmailStr, Field, constr, field_validator
import datetime as dt
from typing import Optional

from constants import ExpenseCategory, MIN_YEAR, MAX_YEAR

Title = constr(strip_whitespace=True, min_length=1, max_length=100)


class UserCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=2, max_length=100)
    email: EmailStr
    password: constr(min_length=6)


class UserLogin(BaseModel):
    email: EmailStr
    password: constr(min_length=1)


class UserPublic(BaseModel):
    id: int
    name: str
    email: str
    role: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class AuthResult(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserPublic


class ExpenseCreate(BaseModel):
    title: Title
    category: ExpenseCategory
    amount: float = Field(..., ge=0.01, allow_inf_nan=False)
    date: dt.date


class ExpenseUpdate(BaseModel):
    title: Optional[Title] = None
    category: Optional[ExpenseCategory] = None
    amount: Optional[float] = Field(None, ge=0.01, allow_inf_nan=False)
    date: Optional[dt.date] = None

    @field_validator("title", "category", "amount", "date")
    @classmethod
    def reject_null(cls, value):
        # omit a field to leave it unchanged; null is not a value
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class ExpenseResponse(BaseModel):
    id: int
    title: str
    category: ExpenseCategory
    amount: float
    date: dt.date
    owner_id: int
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class CategoryTotal(BaseModel):
    category: ExpenseCategory
    total: float
    count: int


class BudgetUpsert(BaseModel):
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=MIN_YEAR, le=MAX_YEAR)


class BudgetResponse(BaseModel):
    id: int
    amount: float
    month: int
    year: int
    owner_id: int
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class BudgetSummary(BaseModel):
    budget: Optional[BudgetResponse] = None
    total_expenses: float
    remaining: float
    percentage: float
    month: int
    year: int
    status: str
    has_budget: bool
