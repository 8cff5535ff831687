import pytest
from stellar_sdk import Account, Keypair, exceptions as sx

import config
import ledger


class FakeHorizon:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.submitted = []

    def fetch_base_fee(self) -> int:
        return 100

    def load_account(self, pub):
        return Account(pub, 1)

    def submit_transaction(self, tx):
        if self.fail:
            raise sx.SdkError("horizon unavailable")
        self.submitted.append(tx)
        return {"hash": f"hash{len(self.submitted)}"}


@pytest.fixture
def horizon(monkeypatch):
    fake = FakeHorizon()
    monkeypatch.setattr(config, "SPARK_ISSUER_G", Keypair.random().public_key)
    monkeypatch.setattr(config, "SPARK_DISTR_S", Keypair.random().secret)
    monkeypatch.setattr(ledger, "_horizon", lambda: (fake, ledger.TESTNET_PASSPHRASE))
    return fake


def test_disabled_ledger_is_a_no_op() -> None:
    assert ledger.is_enabled() is False
    assert ledger.issue_spark(Keypair.random().public_key, 10) is None
    assert ledger.anchor_dna("EGG1", "0" * 32) is None


def test_issue_spark_submits_one_payment(horizon) -> None:
    dest = Keypair.random().public_key
    tx_hash = ledger.issue_spark(dest, 31, memo="SPARK EGG1")

    assert tx_hash == "hash1"
    assert len(horizon.submitted) == 1
    ops = horizon.submitted[0].transaction.operations
    assert [type(op).__name__ for op in ops] == ["Payment"]
    assert ops[0].asset.code == config.SPARK_CODE
    assert len(horizon.submitted[0].signatures) == 1


def test_issue_spark_skips_zero_amount(horizon) -> None:
    assert ledger.issue_spark(Keypair.random().public_key, 0) is None
    assert horizon.submitted == []


def test_anchor_dna_writes_account_data(horizon) -> None:
    tx_hash = ledger.anchor_dna("EGG1", "0" * 32)

    assert tx_hash == "hash1"
    op = horizon.submitted[0].transaction.operations[0]
    assert type(op).__name__ == "ManageData"
    assert op.data_name == "dna:EGG1"


def test_submit_failure_raises_ledger_error(horizon) -> None:
    horizon.fail = True
    with pytest.raises(ledger.LedgerError):
        ledger.issue_spark(Keypair.random().public_key, 10)


def test_extract_result_codes_shapes() -> None:
    class WithExtras(Exception):
        extras = {"result_codes": {"transaction": "tx_bad_seq"}}

    class WithProblem(Exception):
        problem = {"extras": {"result_codes": {"operations": ["op_underfunded"]}}}

    assert ledger._extract_result_codes(WithExtras()) == {"transaction": "tx_bad_seq"}
    assert ledger._extract_result_codes(WithProblem()) == {"operations": ["op_underfunded"]}
    assert ledger._extract_result_codes(ValueError("x")) is None


def test_mask_hides_the_middle() -> None:
    assert ledger._mask("GABCDEFGHIJKLMNOP") == "GABC…MNOP"
    assert ledger._mask(None) == ""


def test_memo_is_trimmed_to_28_utf8_bytes(horizon) -> None:
    ledger.issue_spark(Keypair.random().public_key, 5, memo="SPARK ペットペットペットペット")

    memo_text = horizon.submitted[0].transaction.memo.memo_text
    assert len(memo_text) <= ledger.MEMO_TEXT_MAX_BYTES
    memo_text.decode("utf-8")


def test_data_name_is_trimmed_to_64_utf8_bytes(horizon) -> None:
    ledger.anchor_dna("卵" * 30, "0" * 32)

    op = horizon.submitted[0].transaction.operations[0]
    assert len(op.data_name.encode("utf-8")) <= ledger.DATA_NAME_MAX_BYTES
    assert op.data_name.startswith("dna:卵")


def test_trim_utf8_keeps_short_text() -> None:
    assert ledger._trim_utf8("SPARK EGG1", 28) == "SPARK EGG1"
    assert ledger._trim_utf8("é" * 20, 5) == "éé"
