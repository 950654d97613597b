from __future__ import annotations

import pydantic
import pytest

from person_etl.domain.models import Person


def test_person_equality_is_structural():
    assert Person(first_name="Jill", last_name="Doe") == Person(firstName="Jill", lastName="Doe")
    assert Person(first_name="Jill", last_name="Doe") != Person(first_name="Jane", last_name="Doe")


def test_person_is_frozen():
    person = Person(first_name="Jill", last_name="Doe")
    with pytest.raises(pydantic.ValidationError):
        person.first_name = "Jane"


def test_person_str_and_row():
    person = Person(first_name="Jill", last_name="Doe")
    assert str(person) == "firstName: Jill, lastName: Doe"
    assert person.as_row() == ("Jill", "Doe")


def test_person_serializes_with_aliases():
    person = Person(first_name="Jill", last_name="Doe")
    assert person.model_dump(by_alias=True) == {"firstName": "Jill", "lastName": "Doe"}
