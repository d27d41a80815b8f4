from __future__ import annotations

import asyncio
import subprocess
from datetime import datetime, timezone

import pytest

from ln_common.errors import InvalidTimestampError, RecordFileNotFoundError, TokenValidationError
from ln_controller.models.accounts import KeyType, PrivateKeySpec, TokenProps
from ln_controller.models.network_config import load_initial_resources
from ln_controller.utils.debounce import debounce
from ln_controller.utils.network_remover import SafeDockerNetworkRemover, is_docker_network_id
from ln_controller.utils.record_files import find_record_file, parse_debug_timestamp
from ln_controller.utils.retry import retry_task
from ln_controller.utils.tokens import resolve_supply_key, validate_token_props

pytestmark = pytest.mark.unit_controller


def test_retry_returns_first_success():
    attempts = []

    async def task():
        attempts.append(1)
        if len(attempts) < 3:
            raise ConnectionError("not yet")
        return "ok"

    retried = []
    result = asyncio.run(retry_task(task, max_retries=3, back_off=0, on_retry=retried.append))

    assert result == "ok"
    assert len(attempts) == 3
    assert len(retried) == 2


def test_retry_propagates_last_error_unchanged():
    async def task():
        raise ConnectionError("down")

    with pytest.raises(ConnectionError, match="down"):
        asyncio.run(retry_task(task, max_retries=2, back_off=0))


def test_retry_stops_when_predicate_declines():
    attempts = []

    async def task():
        attempts.append(1)
        raise ValueError("fatal")

    with pytest.raises(ValueError):
        asyncio.run(
            retry_task(task, max_retries=5, back_off=0, should_retry=lambda exc: not isinstance(exc, ValueError))
        )
    assert len(attempts) == 1


def test_retry_rejects_empty_budget():
    async def task():
        return None

    with pytest.raises(ValueError):
        asyncio.run(retry_task(task, max_retries=0))


def test_debounce_drops_calls_inside_window():
    now = [100.0]
    calls = []
    limited = debounce(calls.append, 5.0, clock=lambda: now[0])

    limited("a")
    limited("b")
    now[0] += 4.9
    limited("c")
    now[0] += 0.2
    limited("d")

    assert calls == ["a", "d"]


def _record_name(seconds: int, fraction: str) -> str:
    stamp = datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%dT%H_%M_%S")
    return f"{stamp}.{fraction}Z"


def test_parse_debug_timestamp_accepts_both_separators():
    assert parse_debug_timestamp("1696332095.311345003") == 1696332095311
    assert parse_debug_timestamp("1696332095-311345003") == 1696332095311
    with pytest.raises(InvalidTimestampError):
        parse_debug_timestamp("1696332095:311345003")
    with pytest.raises(InvalidTimestampError):
        parse_debug_timestamp("169633209.311345003")


def test_find_record_file_returns_first_at_or_after(tmp_path):
    seconds = 1696332095
    earlier = _record_name(seconds - 2, "000000001")
    match_name = _record_name(seconds, "500000000")
    later = _record_name(seconds + 2, "000000001")
    for name in (earlier, match_name, later):
        (tmp_path / f"{name}.rcd").write_text("record")
        (tmp_path / f"{name}.rcd_sig").write_text("sig")
    (tmp_path / "unrelated.txt").write_text("noise")

    match = find_record_file(tmp_path, f"{seconds}.311345003")

    assert match.record.name == f"{match_name}.rcd"
    assert match.signature.name == f"{match_name}.rcd_sig"


def test_find_record_file_honors_extension(tmp_path):
    seconds = 1696332095
    name = _record_name(seconds, "000000000")
    (tmp_path / f"{name}.rcd.gz").write_text("record")

    with pytest.raises(RecordFileNotFoundError):
        find_record_file(tmp_path, f"{seconds}.000000000")
    assert find_record_file(tmp_path, f"{seconds}.000000000", "rcd.gz").record.name == f"{name}.rcd.gz"


def test_find_record_file_missing_directory(tmp_path):
    with pytest.raises(RecordFileNotFoundError) as excinfo:
        find_record_file(tmp_path / "absent", "1696332095.000000000")
    assert excinfo.value.context["timestamp"] == "1696332095.000000000"


def test_network_remover_only_removes_well_formed_ids():
    calls = []

    def run(cmd, **kwargs):
        calls.append(cmd)
        if cmd[:3] == ["docker", "network", "ls"]:
            return subprocess.CompletedProcess(cmd, 0, "0123456789ab\nnot-an-id;rm -rf\nABCDEF012345\n", "")
        return subprocess.CompletedProcess(cmd, 0, "", "")

    removed = SafeDockerNetworkRemover(runner=run).remove_all()

    assert removed == ["0123456789ab"]
    assert calls[0][4] == "name=hedera-"
    assert calls[1] == ["docker", "network", "rm", "0123456789ab", "-f"]
    assert is_docker_network_id("  ") is False


def test_network_remover_skips_when_listing_fails():
    def run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, 1, "", "daemon down")

    assert SafeDockerNetworkRemover(runner=run).remove_all() == []


def test_packaged_initial_resources_are_valid():
    resources = load_initial_resources()

    assert {token.token_symbol for token in resources.tokens} == {"FTKN", "NFTKN"}
    for token in resources.tokens:
        validate_token_props(token)


@pytest.mark.parametrize(
    "token",
    [
        TokenProps(token_name="N", token_symbol="N", token_type="NonFungibleUnique", initial_supply=5),
        TokenProps(token_name="F", token_symbol="F", decimals=2),
        TokenProps(token_name="F", token_symbol="F", decimals=2, initial_supply=10, max_supply=10),
        TokenProps(token_name="F", token_symbol="F", supply_type="Finite", decimals=2, initial_supply=10),
        TokenProps(
            token_name="F", token_symbol="F", decimals=2, initial_supply=10, auto_renew_period=100,
            auto_renew_account_id="0.0.2",
        ),
    ],
)
def test_inconsistent_tokens_are_rejected(token):
    with pytest.raises(TokenValidationError):
        validate_token_props(token)


def test_supply_key_defaults_to_operator_key():
    token = TokenProps(token_name="F", token_symbol="F")
    assert resolve_supply_key(token, "302e") == PrivateKeySpec(value="302e", type=KeyType.DER)
    own = PrivateKeySpec(value="abc", type=KeyType.ED25519)
    assert resolve_supply_key(token.model_copy(update={"supply_key": own}), "302e") is own
