"""
Unit tests for CheckpointedScanner.

Covers cold start and resume ranges, idle advancement, the held-back
checkpoint on delivery or enrichment failure, threshold suppression and
eventual no-gap convergence.
"""

import pytest

from app.services.burn_monitor.scanner import CheckpointedScanner
from app.services.burn_monitor.types import TxDetails
from app.utils.exceptions import EnrichmentError, FetchError
from burn_fakes import (
    DEAD,
    UNIT,
    FakeLogSource,
    FakeNotifier,
    FakeStore,
    make_log,
    static_enrich,
    tx_hash,
)


def build_scanner(settings, source, store, notifier, **kwargs):
    return CheckpointedScanner(
        log_source=source,
        store=store,
        notifier=notifier,
        settings=settings,
        enrich=kwargs.pop("enrich", static_enrich),
        **kwargs,
    )


class TestScanRange:
    """Range derivation from the checkpoint."""

    @pytest.mark.asyncio
    async def test_cold_start_uses_lookback_window(self, settings):
        source = FakeLogSource(head=100_000)
        store = FakeStore()
        scanner = build_scanner(settings, source, store, FakeNotifier())

        result = await scanner.scan_once()

        assert result.from_block == 99_400
        assert result.to_block == 100_000
        assert min(start for _, start, _ in source.calls) == 99_400
        assert store.checkpoint == 100_000

    @pytest.mark.asyncio
    async def test_cold_start_near_genesis_clamps_to_zero(self, settings):
        scanner = build_scanner(
            settings, FakeLogSource(head=100), FakeStore(), FakeNotifier()
        )

        result = await scanner.scan_once()

        assert result.from_block == 0

    @pytest.mark.asyncio
    async def test_resume_starts_after_checkpoint(self, settings):
        source = FakeLogSource(head=1_020)
        store = FakeStore(checkpoint=1_000)
        scanner = build_scanner(settings, source, store, FakeNotifier())

        result = await scanner.scan_once()

        assert result.from_block == 1_001
        assert source.calls[0][1] == 1_001
        assert store.checkpoint == 1_020

    @pytest.mark.asyncio
    async def test_no_request_wider_than_provider_limit(self, settings):
        source = FakeLogSource(head=1_100)
        scanner = build_scanner(
            settings, source, FakeStore(checkpoint=1_000), FakeNotifier()
        )

        await scanner.scan_once()

        assert source.calls
        assert all(end - start <= 9 for _, start, end in source.calls)

    @pytest.mark.asyncio
    async def test_empty_delta_is_noop(self, settings):
        """Head equal to the checkpoint: no queries, no write."""
        source = FakeLogSource(head=1_000)
        store = FakeStore(checkpoint=1_000)
        scanner = build_scanner(settings, source, store, FakeNotifier())

        result = await scanner.scan_once()

        assert source.calls == []
        assert store.checkpoint_history == []
        assert result.checkpoint == 1_000

    @pytest.mark.asyncio
    async def test_checkpoint_never_moves_backward(self, settings):
        """A lagging provider head does not rewind the checkpoint."""
        store = FakeStore(checkpoint=1_000)
        scanner = build_scanner(
            settings, FakeLogSource(head=990), store, FakeNotifier()
        )

        await scanner.scan_once()

        assert store.checkpoint == 1_000
        assert store.checkpoint_history == []

    @pytest.mark.asyncio
    async def test_checkpoint_reread_every_cycle(self, settings):
        source = FakeLogSource(head=1_020)
        store = FakeStore(checkpoint=1_000)
        scanner = build_scanner(settings, source, store, FakeNotifier())

        await scanner.scan_once()
        store.checkpoint = 500  # manual admin reset
        source.head = 510
        result = await scanner.scan_once()

        assert result.from_block == 501


class TestEventHandling:
    """Delivery, persistence and checkpoint advancement."""

    @pytest.mark.asyncio
    async def test_delivers_and_persists_in_block_order(self, settings):
        source = FakeLogSource(
            head=1_020,
            logs=[
                make_log(2, block=1_010, to=DEAD),
                make_log(1, block=1_005),
            ],
        )
        store = FakeStore(checkpoint=1_000)
        notifier = FakeNotifier()
        scanner = build_scanner(settings, source, store, notifier)

        result = await scanner.scan_once()

        assert [e.tx_hash for e in notifier.delivered] == [tx_hash(1), tx_hash(2)]
        assert set(store.records) == {tx_hash(1), tx_hash(2)}
        assert store.checkpoint_history == [1_005, 1_010, 1_020]
        assert result.delivered == 2
        assert result.complete

    @pytest.mark.asyncio
    async def test_failed_delivery_holds_back_checkpoint(self, settings):
        """E at N fails, N+5 succeeds: checkpoint stays at N-1."""
        source = FakeLogSource(
            head=1_020,
            logs=[make_log(1, block=1_005), make_log(2, block=1_010)],
        )
        store = FakeStore(checkpoint=1_000)
        notifier = FakeNotifier(fail={tx_hash(1)})
        scanner = build_scanner(settings, source, store, notifier)

        result = await scanner.scan_once()

        assert store.checkpoint == 1_004
        assert tx_hash(1) not in store.records
        # Later events are still processed
        assert tx_hash(2) in store.records
        assert result.failed == 1
        assert result.delivered == 1
        assert not result.complete

    @pytest.mark.asyncio
    async def test_retry_next_cycle_closes_gap(self, settings):
        source = FakeLogSource(
            head=1_020,
            logs=[make_log(1, block=1_005), make_log(2, block=1_010)],
        )
        store = FakeStore(checkpoint=1_000)
        notifier = FakeNotifier(fail={tx_hash(1)})
        scanner = build_scanner(settings, source, store, notifier)

        await scanner.scan_once()
        notifier.fail.clear()
        source.head = 1_030
        result = await scanner.scan_once()

        assert result.from_block == 1_005
        assert result.delivered == 1
        assert result.skipped == 1
        assert store.checkpoint == 1_030
        assert set(store.records) == {tx_hash(1), tx_hash(2)}
        assert notifier.attempts.count(tx_hash(2)) == 1

    @pytest.mark.asyncio
    async def test_failure_inside_block_holds_whole_block(self, settings):
        source = FakeLogSource(
            head=1_020,
            logs=[
                make_log(1, block=1_005, log_index=0),
                make_log(2, block=1_005, log_index=1),
            ],
        )
        store = FakeStore(checkpoint=1_000)
        notifier = FakeNotifier(fail={tx_hash(2)})
        scanner = build_scanner(settings, source, store, notifier)

        await scanner.scan_once()

        assert store.checkpoint == 1_004
        assert tx_hash(1) in store.records
        assert tx_hash(2) not in store.records

    @pytest.mark.asyncio
    async def test_failure_at_first_block_of_cold_start(self, settings):
        source = FakeLogSource(head=100_000, logs=[make_log(1, block=99_400)])
        store = FakeStore()
        notifier = FakeNotifier(fail={tx_hash(1)})
        scanner = build_scanner(settings, source, store, notifier)

        await scanner.scan_once()

        assert store.checkpoint == 99_399

    @pytest.mark.asyncio
    async def test_no_write_when_failure_at_first_resumed_block(self, settings):
        source = FakeLogSource(head=1_020, logs=[make_log(1, block=1_001)])
        store = FakeStore(checkpoint=1_000)
        scanner = build_scanner(
            settings, source, store, FakeNotifier(fail={tx_hash(1)})
        )

        await scanner.scan_once()

        assert store.checkpoint_history == []
        assert store.checkpoint == 1_000

    @pytest.mark.asyncio
    async def test_below_threshold_is_recorded_without_alert(self, settings):
        source = FakeLogSource(
            head=1_020, logs=[make_log(1, block=1_005, value=3_999 * UNIT)]
        )
        store = FakeStore(checkpoint=1_000)
        notifier = FakeNotifier()
        scanner = build_scanner(settings, source, store, notifier)

        result = await scanner.scan_once()

        assert tx_hash(1) in store.records
        assert notifier.attempts == []
        assert result.suppressed == 1
        assert store.checkpoint == 1_020

    @pytest.mark.asyncio
    async def test_threshold_amount_is_alerted(self, settings):
        source = FakeLogSource(
            head=1_020, logs=[make_log(1, block=1_005, value=4_000 * UNIT)]
        )
        notifier = FakeNotifier()
        scanner = build_scanner(
            settings, source, FakeStore(checkpoint=1_000), notifier
        )

        await scanner.scan_once()

        assert notifier.attempts == [tx_hash(1)]

    @pytest.mark.asyncio
    async def test_already_recorded_burn_is_skipped(self, settings):
        source = FakeLogSource(head=1_020, logs=[make_log(1, block=1_005)])
        store = FakeStore(checkpoint=1_000)
        notifier = FakeNotifier()
        scanner = build_scanner(settings, source, store, notifier)
        await scanner.scan_once()

        store.checkpoint = 1_000
        result = await scanner.scan_once()

        assert result.skipped == 1
        assert notifier.attempts == [tx_hash(1)]
        assert store.checkpoint == 1_020

    @pytest.mark.asyncio
    async def test_enrichment_failure_holds_back_checkpoint(self, settings):
        async def enrich(tx: str, block: int) -> TxDetails:
            if tx == tx_hash(1):
                raise EnrichmentError(tx, block, TimeoutError())
            return await static_enrich(tx, block)

        source = FakeLogSource(
            head=1_020,
            logs=[make_log(1, block=1_008), make_log(2, block=1_012)],
        )
        store = FakeStore(checkpoint=1_000)
        scanner = build_scanner(
            settings, source, store, FakeNotifier(), enrich=enrich
        )

        result = await scanner.scan_once()

        assert store.checkpoint == 1_007
        assert result.failed == 1
        assert tx_hash(2) in store.records

    @pytest.mark.asyncio
    async def test_fetch_error_leaves_checkpoint_untouched(self, settings):
        source = FakeLogSource(head=1_020, logs=[make_log(1, block=1_005)])
        source.fail_ranges[(1_011, 1_020)] = 1
        store = FakeStore(checkpoint=1_000)
        scanner = build_scanner(settings, source, store, FakeNotifier())

        with pytest.raises(FetchError):
            await scanner.scan_once()

        assert store.checkpoint_history == []

    @pytest.mark.asyncio
    async def test_stop_request_interrupts_between_blocks(self, settings):
        stop = {"requested": False}
        source = FakeLogSource(
            head=1_020,
            logs=[make_log(1, block=1_005), make_log(2, block=1_010)],
        )
        store = FakeStore(checkpoint=1_000)

        class StoppingNotifier(FakeNotifier):
            async def notify(self, event):
                stop["requested"] = True
                return await super().notify(event)

        scanner = build_scanner(
            settings, source, store, StoppingNotifier(),
            should_stop=lambda: stop["requested"],
        )

        result = await scanner.scan_once()

        assert result.interrupted
        assert store.checkpoint == 1_005
        assert tx_hash(2) not in store.records

    @pytest.mark.asyncio
    async def test_eventual_success_reaches_head_without_gaps(self, settings):
        logs = [make_log(n, block=1_000 + n * 3) for n in range(1, 8)]
        source = FakeLogSource(head=1_030, logs=logs)
        store = FakeStore(checkpoint=1_000)
        notifier = FakeNotifier(fail={tx_hash(3), tx_hash(6)})
        scanner = build_scanner(settings, source, store, notifier)

        await scanner.scan_once()
        notifier.fail = {tx_hash(6)}
        await scanner.scan_once()
        notifier.fail = set()
        await scanner.scan_once()

        assert store.checkpoint == 1_030
        assert set(store.records) == {tx_hash(n) for n in range(1, 8)}
        assert store.checkpoint_history == sorted(store.checkpoint_history)
