from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    """Declarative base; tables default to the lower-cased class name."""

    @declared_attr.directive
    def __tablename__(cls) -> str:  # noqa: N805
        return cls.__name__.lower()


def load_models() -> None:
    """Import every model module so ``Base.metadata`` is complete (alembic, tests)."""

    import zawadii_api.models  # noqa: F401
