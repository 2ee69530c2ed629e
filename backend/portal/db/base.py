from enum import Enum

from sqlalchemy.orm import DeclarativeBase, declared_attr


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum members by value so the database sees ``"admin"``, not ``"ADMIN"``."""
    return [member.value for member in enum_cls]


class Base(DeclarativeBase):
    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
