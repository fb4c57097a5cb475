from pathlib import Path

import pytest

from versweep.core.errors import InstallLocationBusyError
from versweep.core.identity import PackageIdentity
from versweep.core.location import InstallLocation

from tests.fakes.installer import FakeInstaller
from tests.fakes.process import FakeProcessRunner


def make_location(installer: FakeInstaller | None = None) -> InstallLocation:
    return InstallLocation(installer or FakeInstaller(), FakeProcessRunner(), cwd=Path("/proj"))


def test_reserve_is_exclusive_per_name() -> None:
    location = make_location()

    with location.reserve("ap"):
        assert location.is_reserved("ap")
        with pytest.raises(InstallLocationBusyError, match="'ap'"):
            with location.reserve("ap"):
                pass
        # other names are independent
        with location.reserve("bq"):
            assert location.is_reserved("bq")

    assert not location.is_reserved("ap")


def test_reservation_released_on_error() -> None:
    location = make_location()

    with pytest.raises(RuntimeError):
        with location.reserve("ap"):
            raise RuntimeError("boom")

    assert not location.is_reserved("ap")


def test_installed_reports_identity() -> None:
    location = make_location(FakeInstaller(installed={"ap": "1.2.0"}))

    assert location.installed("ap") == PackageIdentity("ap", "1.2.0")
    assert location.installed("bq") is None


def test_identity_parse() -> None:
    assert PackageIdentity.parse("urllib3==1.26.0") == PackageIdentity("urllib3", "1.26.0")
    assert PackageIdentity.parse("urllib3@1.26.0") == PackageIdentity("urllib3", "1.26.0")
    assert PackageIdentity("urllib3", "1.26.0").requirement == "urllib3==1.26.0"
    with pytest.raises(ValueError, match="must pin a version"):
        PackageIdentity.parse("urllib3")
