from sqlalchemy.orm import declarative_base


class CustomBase:
    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        column_str = ", ".join(
            f"{c.name}={getattr(self, c.name)!r}" for c in self.__table__.columns
        )
        return f"{class_name}({column_str})"


Base = declarative_base(cls=CustomBase)
