"""Tests for shop_common.id_generator."""

import re

import pytest

from src.shop_common.id_generator import (
    SnowflakeIdGenerator,
    generate_external_order_id,
    generate_id,
)


class TestSnowflakeIdGenerator:
    def test_returns_str(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        assert isinstance(gen.next_id(), str)

    def test_unique_ids(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        ids = {gen.next_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_monotonically_increasing(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        prev = int(gen.next_id())
        for _ in range(100):
            current = int(gen.next_id())
            assert current > prev
            prev = current

    def test_rejects_out_of_range_machine_id(self) -> None:
        with pytest.raises(ValueError):
            SnowflakeIdGenerator(machine_id=1024)

    def test_module_level_generator(self) -> None:
        assert generate_id() != generate_id()


class TestExternalOrderId:
    def test_format(self) -> None:
        assert re.fullmatch(r"ORD-\d{13}-[A-Z0-9]{9}", generate_external_order_id())

    def test_unique_within_same_millisecond(self) -> None:
        ids = {generate_external_order_id() for _ in range(500)}
        assert len(ids) == 500
