import logging
import threading

import pytest

from pixelcomp.errors import DuplicateRegistration, InvalidArgument
from pixelcomp.registry import Registry, new_registry

logger = logging.getLogger(__name__)


def test_registry_add_get():
    registry = Registry("thing")
    item = object()
    assert registry.add("a", item) is item
    assert registry.get("a") is item
    assert "a" in registry
    assert len(registry) == 1
    assert "thing" in repr(registry)


def test_registry_duplicate_keeps_entry():
    registry = Registry("thing")
    first, second = object(), object()
    registry.add("a", first)
    with pytest.raises(DuplicateRegistration) as excinfo:
        registry.add("a", second)
    assert "already registered" in str(excinfo.value)
    assert registry.get("a") is first


@pytest.mark.parametrize("name", ["", None, 3])
def test_registry_invalid_name(name):
    with pytest.raises(InvalidArgument):
        Registry().add(name, object())


def test_registry_unknown():
    with pytest.raises(InvalidArgument):
        Registry().get("missing")
    with pytest.raises(InvalidArgument):
        Registry().get(["unhashable"])


def test_registry_sorted():
    registry = Registry()
    for name in ["c", "a", "b"]:
        registry.add(name, name.upper())
    assert registry.names() == ["a", "b", "c"]
    assert registry.values() == ["A", "B", "C"]
    assert list(registry) == ["a", "b", "c"]


def test_new_registry_attribute():
    registry, register = new_registry("filter", attribute="key")

    @register("invert")
    def invert(image):
        return image

    assert registry.get("invert") is invert
    assert invert.key == "invert"


def test_registry_concurrent_registration():
    registry = Registry()
    errors = []

    def worker(start):
        for i in range(start, start + 50):
            try:
                registry.add("entry%d" % (i % 100), i)
            except DuplicateRegistration as e:
                errors.append(e)

    threads = [threading.Thread(target=worker, args=(n * 50,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(registry) == 100
    assert len(errors) == 100
