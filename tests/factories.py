"""Shared principals and builders for tests."""
from application.dtos.classes import CreateClassRequest
from core.config import DEFAULT_OWNER


OWNER = DEFAULT_OWNER
VAULT = "ST3FEEVAULT0000000000000000000000000000"
INSTRUCTOR = "ST2INSTRUCTOR000000000000000000000000000"
OTHER_INSTRUCTOR = "ST2OTHERINSTRUCTOR0000000000000000000000"
ALICE = "ST1ALICE000000000000000000000000000000000"
BOB = "ST1BOB00000000000000000000000000000000000"


def class_request(**overrides) -> CreateClassRequest:
    data = {
        "title": "Morning Yoga",
        "description": "Vinyasa flow for all levels",
        "price": 1000,
        "duration": 60,
        "start_time": 100,
        "capacity": 10,
    }
    data.update(overrides)
    return CreateClassRequest(**data)


async def create_class(classes, instructor: str = INSTRUCTOR, **overrides) -> int:
    record = await classes.create_class(instructor, class_request(**overrides))
    return record.id
