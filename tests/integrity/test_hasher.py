from dataclasses import replace
from datetime import datetime

import pytest

from clock_trust.core.enums import EventType, HashAlgorithm, HashEncoding, TimestampPrecision
from clock_trust.core.exceptions import IntegrityError
from clock_trust.events.model import ClockEvent
from clock_trust.integrity.codes import compare_events, parse_verification_uri, readable_code, render_qr_png, verification_uri
from clock_trust.integrity.hasher import IntegrityHasher, format_timestamp
from clock_trust.integrity.model import HashConfig

SALT = "a" * 64


@pytest.fixture()
def event():
    return ClockEvent(
        employee_id="E1",
        company_id="C1",
        user_id="U1",
        type=EventType.ENTRY,
        timestamp=datetime(2025, 1, 6, 8, 5, 30, 250000),
        id="evt-1",
        latitude=10.7769,
        longitude=106.7009,
        ip_address="10.0.0.7",
        device_descriptor="Desktop / Windows / Chrome 120",
        photo_ref="photos/e1/20250106-0805.jpg",
        nfc_tag="04:A2:2B:1C",
    )


@pytest.fixture()
def hasher():
    return IntegrityHasher()


def test_seal_is_deterministic_for_fixed_salt(hasher, event):
    a = hasher.seal(event, salt=SALT)
    b = hasher.seal(event, salt=SALT)

    assert a == b
    assert len(a.hash) == 64
    assert len(a.checksum) == 8
    assert a.timestamp == "2025-01-06T08:05:30.250"
    assert a.version == "1.0"
    assert a.algorithm == "SHA256"
    assert list(a.included_fields) == [
        "type", "user_id", "employee_id", "company_id", "timestamp",
        "location", "device_descriptor", "ip_address", "photo_ref", "nfc_tag",
    ]


def test_random_salt_differs_between_seals(hasher, event):
    a = hasher.seal(event)
    b = hasher.seal(event)

    assert a.salt != b.salt
    assert a.hash != b.hash
    assert len(a.salt) == 64


def test_zero_coordinates_are_hashed(hasher, event):
    bundle = hasher.seal(replace(event, latitude=0.0, longitude=0.0), salt=SALT)

    assert "location" in bundle.included_fields


def test_verify_accepts_untouched_event(hasher, event):
    bundle = hasher.seal(event)
    result = hasher.verify(event, bundle)

    assert result.is_valid
    assert result.integrity and result.authenticity and result.timestamp_ok
    assert result.errors == []
    assert not result.config_drift


TAMPERED = {
    "type": {"type": EventType.EXIT},
    "user_id": {"user_id": "U2"},
    "employee_id": {"employee_id": "E2"},
    "company_id": {"company_id": "C2"},
    "timestamp": {"timestamp": datetime(2025, 1, 6, 8, 5, 31, 250000)},
    "location": {"latitude": 10.7770},
    "device_descriptor": {"device_descriptor": "Mobile / Android / Chrome 120"},
    "ip_address": {"ip_address": "10.0.0.8"},
    "photo_ref": {"photo_ref": "photos/e1/other.jpg"},
    "nfc_tag": {"nfc_tag": "04:A2:2B:1D"},
}


@pytest.mark.parametrize("algorithm", list(HashAlgorithm))
@pytest.mark.parametrize("encoding", list(HashEncoding))
@pytest.mark.parametrize("precision", list(TimestampPrecision))
def test_verify_round_trip_for_every_hash_config(hasher, event, algorithm, encoding, precision):
    config = HashConfig(algorithm=algorithm, encoding=encoding, timestamp_precision=precision)
    bundle = hasher.seal(event, config)

    result = hasher.verify(event, bundle, config)

    assert result.is_valid
    assert result.errors == []
    assert bundle.algorithm == algorithm.value
    if encoding == HashEncoding.BASE64URL:
        assert "=" not in bundle.hash


def test_every_hashed_field_is_covered(hasher, event):
    assert set(hasher.seal(event).included_fields) == set(TAMPERED)


@pytest.mark.parametrize("field_name", list(TAMPERED))
def test_tampered_field_is_detected(hasher, event, field_name):
    bundle = hasher.seal(event)

    result = hasher.verify(replace(event, **TAMPERED[field_name]), bundle)

    assert not result.is_valid
    assert not result.hash_match
    assert not result.integrity
    assert "Hash mismatch - event data may have been altered" in result.errors


def test_forged_signature_is_detected(hasher, event):
    bundle = replace(hasher.seal(event), signature="0" * 64)
    result = hasher.verify(event, bundle)

    assert not result.is_valid
    assert not result.signature_valid
    assert not result.authenticity
    assert not result.checksum_valid


def test_signing_key_is_required_to_verify(hasher, event):
    keyed = HashConfig(signing_key="s3cret")
    bundle = hasher.seal(event, keyed)

    assert hasher.verify(event, bundle, keyed).is_valid
    assert not hasher.verify(event, bundle).signature_valid


def test_timestamp_skew_is_only_a_warning(hasher, event):
    bundle = hasher.seal(event, HashConfig(timestamp_precision=TimestampPrecision.MINUTES))

    result = hasher.verify(event, bundle, HashConfig(timestamp_precision=TimestampPrecision.MINUTES))
    assert result.is_valid
    assert result.timestamp_ok

    late = replace(event, timestamp=datetime(2025, 1, 6, 8, 7, 30))
    skewed = hasher.verify(late, bundle, HashConfig(timestamp_precision=TimestampPrecision.MINUTES))
    assert not skewed.timestamp_ok
    assert "Significant difference between event and sealed timestamp" in skewed.warnings


def test_config_drift_is_reported(hasher, event):
    bundle = hasher.seal(event, HashConfig(include_ip=False))

    result = hasher.verify(event, bundle, HashConfig())

    assert result.config_drift
    assert "Fields not included in the sealed hash: ip_address" in result.warnings
    assert not result.is_valid


def test_require_valid_raises(hasher, event):
    bundle = hasher.seal(event)

    assert hasher.require_valid(event, bundle).is_valid
    with pytest.raises(IntegrityError):
        hasher.require_valid(replace(event, user_id="U2"), bundle)


def test_format_timestamp_precision():
    ts = datetime(2025, 1, 6, 8, 5, 30, 250000)

    assert format_timestamp(ts, TimestampPrecision.MILLISECONDS) == "2025-01-06T08:05:30.250"
    assert format_timestamp(ts, TimestampPrecision.SECONDS) == "2025-01-06T08:05:30"
    assert format_timestamp(ts, TimestampPrecision.MINUTES) == "2025-01-06T08:05"


def test_verification_uri_round_trip(hasher, event):
    bundle = hasher.seal(event)
    uri = verification_uri(bundle)

    assert uri.startswith("clocktrust://verify/")
    parsed = parse_verification_uri(uri)
    assert parsed.is_valid
    assert parsed.data["hash"] == bundle.hash


def test_corrupted_verification_uri(hasher, event):
    assert not parse_verification_uri("clocktrust://verify/not-base64!").is_valid

    bundle = replace(hasher.seal(event), checksum="deadbeef")
    parsed = parse_verification_uri(verification_uri(bundle))
    assert not parsed.is_valid
    assert parsed.error == "Invalid checksum"


def test_readable_code_and_qr(hasher, event):
    bundle = hasher.seal(event)
    code = readable_code(bundle)

    assert code == f"{bundle.hash[:8]}-{bundle.signature[:8]}-08:05".upper()
    assert render_qr_png(bundle).startswith(b"\x89PNG")


def test_compare_events(event):
    identical, diffs, similarity = compare_events(event, event)
    assert identical
    assert diffs == []
    assert similarity == 100

    identical, diffs, similarity = compare_events(event, replace(event, ip_address="10.0.0.8"))
    assert not identical
    assert diffs == ['ip_address: "10.0.0.7" vs "10.0.0.8"']
    assert similarity < 100
