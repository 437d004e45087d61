from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.farm_hr.farm_hr.common.pagination import Page
from src.farm_hr.farm_hr.core.enums import MilkPeriod, Role
from src.farm_hr.farm_hr.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.farm_hr.farm_hr.milk.model import Animal, MilkMeasurement, MilkSnapshot
from src.farm_hr.farm_hr.milk.service import MilkService
from src.farm_hr.farm_hr.users.model import Identity, User


class FakeMilkRepo:
    def __init__(self):
        self.animals: dict[int, Animal] = {}
        self.sessions: dict[tuple, MilkMeasurement] = {}

    def get_animal(self, animal_id):
        return self.animals.get(int(animal_id))

    def get_animal_by_tag(self, animal_tag):
        return next((a for a in self.animals.values() if a.animal_tag == animal_tag), None)

    def create_animal(self, animal_tag):
        animal = Animal(animal_id=len(self.animals) + 1, animal_tag=animal_tag)
        self.animals[animal.animal_id] = animal
        return animal

    def list_animals(self):
        return sorted(self.animals.values(), key=lambda a: a.animal_tag)

    def record_session(self, *, animal, record_date, period, quantity, recorded_at, recorder):
        m = MilkMeasurement(
            animal_tag=animal.animal_tag,
            quantity=quantity,
            record_date=record_date,
            period=period,
            recorded_at=recorded_at,
            recorder=recorder,
        )
        self.sessions[(animal.animal_id, record_date, period)] = m
        return m

    def add(self, tag, quantity, day, period=MilkPeriod.MORNING):
        animal = self.get_animal_by_tag(tag) or self.create_animal(tag)
        hour = 6 if period == MilkPeriod.MORNING else 18
        self.record_session(
            animal=animal,
            record_date=day,
            period=period,
            quantity=quantity,
            recorded_at=datetime.combine(day, datetime.min.time()) + timedelta(hours=hour),
            recorder="Leader",
        )

    def _matching(self, start, end, tag):
        return [
            m
            for m in self.sessions.values()
            if start <= m.record_date <= end and (not tag or tag.lower() in m.animal_tag.lower())
        ]

    def snapshot(self, *, start_date, end_date, previous_start, previous_end, animal_tag=None):
        current = sorted(self._matching(start_date, end_date, animal_tag), key=lambda m: m.recorded_at, reverse=True)
        previous = sum(m.quantity for m in self._matching(previous_start, previous_end, animal_tag))
        return MilkSnapshot(measurements=current, previous_total=previous)


class FakeUsers:
    def get_by_id(self, user_id):
        if user_id != 1:
            return None
        return User(
            user_id=1,
            name="Leader",
            email=None,
            phone="0900",
            username="leader",
            password_hash="x",
            role=Role.TEAM_LEADER,
        )


LEADER = Identity(user_id=1, role=Role.TEAM_LEADER)


def _service(repo=None):
    return MilkService(repo or FakeMilkRepo(), FakeUsers())


def test_add_animal_rejects_duplicates():
    svc = _service()
    svc.add_animal("COW-1")

    with pytest.raises(ConflictError):
        svc.add_animal("COW-1")
    with pytest.raises(ValidationError):
        svc.add_animal("  ")


def test_record_same_session_twice_overwrites():
    repo = FakeMilkRepo()
    svc = _service(repo)
    animal = svc.add_animal("COW-1")
    now = datetime(2026, 10, 19, 6, 30)

    svc.record(LEADER, animal_id=animal.animal_id, period="morning", quantity=8, now=now)
    svc.record(LEADER, animal_id=animal.animal_id, period="morning", quantity="9.5", now=now + timedelta(minutes=5))
    svc.record(LEADER, animal_id=animal.animal_id, period="evening", quantity=4, now=now + timedelta(hours=12))

    assert len(repo.sessions) == 2
    assert repo.sessions[(animal.animal_id, date(2026, 10, 19), MilkPeriod.MORNING)].quantity == 9.5


def test_record_validation():
    svc = _service()
    animal = svc.add_animal("COW-1")

    with pytest.raises(ValidationError):
        svc.record(LEADER, animal_id=animal.animal_id, period=None, quantity=3)
    with pytest.raises(ValidationError):
        svc.record(LEADER, animal_id=animal.animal_id, period="noon", quantity=3)
    with pytest.raises(ValidationError):
        svc.record(LEADER, animal_id=animal.animal_id, period="morning", quantity=-1)
    with pytest.raises(NotFoundError):
        svc.record(LEADER, animal_id=99, period="morning", quantity=3)
    with pytest.raises(NotFoundError):
        svc.record(Identity(user_id=2, role=Role.TEAM_LEADER), animal_id=animal.animal_id, period="morning", quantity=3)


def test_summary_requires_a_date():
    with pytest.raises(ValidationError):
        _service().summary(range_name="week", anchor=None, animal_tag=None, page=Page(1, 10))


def test_paging_does_not_change_aggregates():
    repo = FakeMilkRepo()
    for i, tag in enumerate(["A", "B", "C", "A", "B"]):
        repo.add(tag, 2 + i, date(2026, 10, 18) + timedelta(days=i))
    svc = _service(repo)

    first = svc.summary(range_name="week", anchor="2026-10-19", animal_tag=None, page=Page(page=1, limit=2))
    last = svc.summary(range_name="week", anchor="2026-10-19", animal_tag=None, page=Page(page=3, limit=2))

    assert first.summary == last.summary
    assert first.summary.total_quantity == 2 + 3 + 4 + 5 + 6
    assert first.total_records == last.total_records == 5
    assert len(first.records) == 2
    assert len(last.records) == 1
    # newest first
    assert first.records[0].record_date == date(2026, 10, 22)


def test_summary_compares_with_previous_window_and_filters_tag():
    repo = FakeMilkRepo()
    repo.add("COW-1", 10, date(2026, 10, 19))
    repo.add("COW-2", 7, date(2026, 10, 19))
    repo.add("COW-1", 4, date(2026, 10, 12))

    result = _service(repo).summary(range_name="week", anchor="2026-10-19", animal_tag="cow-1", page=Page(1, 10))

    assert result.summary.total_quantity == 10
    assert result.summary.previous_total_quantity == 4
    assert result.summary.animal.active_days == 1
    data = result.to_dict()
    assert data["range"] == "week"
    assert data["pagination"]["total_records"] == 1
    assert data["records"][0]["animal_tag"] == "COW-1"
