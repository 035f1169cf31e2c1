"""Pytest configuration and fixtures for search compiler tests."""

from datetime import datetime
from types import SimpleNamespace
from typing import List, Optional

import pytest
from dotenv import load_dotenv
from sqlalchemy import ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from datasearch.querydsl.compilers.document import MongoWhereCompiler
from datasearch.querydsl.compilers.relational import SQLAlchemyWhereCompiler
from datasearch.querydsl.inference import ValueInferencer

# Load environment variables
load_dotenv()


class Base(DeclarativeBase):
    pass


class Address(Base):
    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(primary_key=True)
    city: Mapped[str]


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str]
    address_id: Mapped[Optional[int]] = mapped_column(ForeignKey("addresses.id"))
    address: Mapped[Optional[Address]] = relationship()


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True)
    status: Mapped[str]
    total: Mapped[int]
    note: Mapped[Optional[str]]
    created_at: Mapped[datetime]
    customer_id: Mapped[Optional[int]] = mapped_column(ForeignKey("customers.id"))
    customer: Mapped[Optional[Customer]] = relationship()
    lines: Mapped[List["OrderLine"]] = relationship()


class OrderLine(Base):
    __tablename__ = "order_lines"

    id: Mapped[int] = mapped_column(primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"))
    sku: Mapped[str]


@pytest.fixture(scope="session")
def models():
    """Mapped classes used by the relational compiler tests."""
    return SimpleNamespace(Address=Address, Customer=Customer, Order=Order, OrderLine=OrderLine)


@pytest.fixture
def sql_compiler():
    """Relational compiler rooted at Order with default separators."""
    return SQLAlchemyWhereCompiler(Order, inferencer=ValueInferencer())


@pytest.fixture
def mongo_compiler():
    """Document compiler with default separators."""
    return MongoWhereCompiler(inferencer=ValueInferencer())


@pytest.fixture(scope="session")
def inferencer():
    return ValueInferencer()
