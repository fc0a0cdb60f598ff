import asyncio
import re

import pytest

from auth_server.application.verification_codes import VerificationCodeStore
from auth_server.domain.codes import CodeNamespace, ConsumeResult
from auth_server.domain.errors import StoreUnavailable

OTP = CodeNamespace.OTP
RESET = CodeNamespace.PASSWORD_RESET
PHONE = "+15551234567"


@pytest.mark.asyncio
async def test_issue_returns_six_digit_code_stored_hashed(codes, cache):
    code = await codes.issue(OTP, PHONE)

    assert re.fullmatch(r"[0-9]{6}", code)
    entry = cache.entries[f"otp:{PHONE}"]
    assert code not in entry.values()
    assert cache.ttls[f"otp:{PHONE}"] == 300


@pytest.mark.asyncio
async def test_reset_codes_live_fifteen_minutes(codes, cache):
    await codes.issue(RESET, "jeremy@example.com")
    assert cache.ttls["pwd_reset:jeremy@example.com"] == 900


@pytest.mark.asyncio
async def test_issue_then_consume_succeeds_exactly_once(codes):
    code = await codes.issue(OTP, PHONE)

    assert await codes.consume(OTP, PHONE, code) is ConsumeResult.OK
    assert await codes.consume(OTP, PHONE, code) is ConsumeResult.EXPIRED


@pytest.mark.asyncio
async def test_never_issued_is_expired(codes):
    assert await codes.consume(OTP, PHONE, "123456") is ConsumeResult.EXPIRED


@pytest.mark.asyncio
async def test_mismatch_keeps_the_code(codes, fixed_codes):
    code = await codes.issue(OTP, PHONE)

    assert await codes.consume(OTP, PHONE, "000000") is ConsumeResult.MISMATCH
    assert await codes.consume(OTP, PHONE, code) is ConsumeResult.OK


@pytest.mark.asyncio
async def test_attempt_budget_burns_the_code(cache, fixed_codes):
    codes = VerificationCodeStore(cache, max_attempts=3)
    code = await codes.issue(OTP, PHONE)

    for _ in range(3):
        assert await codes.consume(OTP, PHONE, "000000") is ConsumeResult.MISMATCH
    assert await codes.consume(OTP, PHONE, code) is ConsumeResult.EXPIRED


@pytest.mark.asyncio
async def test_reissue_invalidates_previous_code(codes, fixed_codes):
    first = await codes.issue(OTP, PHONE)
    second = await codes.issue(OTP, PHONE)
    assert first != second

    assert await codes.consume(OTP, PHONE, first) in (
        ConsumeResult.EXPIRED,
        ConsumeResult.MISMATCH,
    )
    assert await codes.consume(OTP, PHONE, second) is ConsumeResult.OK


@pytest.mark.asyncio
async def test_otp_expires_after_five_minutes(codes, clock):
    code = await codes.issue(OTP, PHONE)
    clock.advance(minutes=5)
    assert await codes.consume(OTP, PHONE, code) is ConsumeResult.EXPIRED


@pytest.mark.asyncio
async def test_otp_still_valid_just_before_ttl(codes, clock):
    code = await codes.issue(OTP, PHONE)
    clock.advance(minutes=4, seconds=59)
    assert await codes.consume(OTP, PHONE, code) is ConsumeResult.OK


@pytest.mark.asyncio
async def test_concurrent_consumes_succeed_at_most_once(codes):
    code = await codes.issue(OTP, PHONE)

    results = await asyncio.gather(
        *(codes.consume(OTP, PHONE, code) for _ in range(5))
    )

    assert results.count(ConsumeResult.OK) == 1
    losers = set(results) - {ConsumeResult.OK}
    assert losers <= {ConsumeResult.EXPIRED, ConsumeResult.MISMATCH}


@pytest.mark.asyncio
async def test_namespaces_do_not_collide(codes, fixed_codes):
    otp = await codes.issue(OTP, "same-subject")
    reset = await codes.issue(RESET, "same-subject")

    assert await codes.consume(RESET, "same-subject", otp) is ConsumeResult.MISMATCH
    assert await codes.consume(OTP, "same-subject", otp) is ConsumeResult.OK
    assert await codes.consume(RESET, "same-subject", reset) is ConsumeResult.OK


@pytest.mark.asyncio
async def test_invalidate_removes_pending_code(codes):
    code = await codes.issue(OTP, PHONE)
    await codes.invalidate(OTP, PHONE)
    assert await codes.consume(OTP, PHONE, code) is ConsumeResult.EXPIRED


@pytest.mark.asyncio
async def test_empty_subject_is_rejected(codes):
    with pytest.raises(ValueError):
        await codes.issue(OTP, "")


@pytest.mark.asyncio
async def test_store_failures_propagate(errored_cache):
    codes = VerificationCodeStore(errored_cache)
    with pytest.raises(StoreUnavailable):
        await codes.issue(OTP, PHONE)
    with pytest.raises(StoreUnavailable):
        await codes.consume(OTP, PHONE, "123456")


def test_from_settings_uses_configured_policy(cache):
    from auth_server.settings import Settings

    settings = Settings(otp_ttl_seconds=60, reset_code_ttl_seconds=120)
    codes = VerificationCodeStore.from_settings(cache, settings)
    assert codes.ttl_for(OTP) == 60
    assert codes.ttl_for(RESET) == 120
