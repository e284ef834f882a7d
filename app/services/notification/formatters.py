"""
Telegram message formatters.

HTML messages for burn alerts, /stats, /test, startup and errors.
"""

import html
import time

from app.config.settings import Settings
from app.services.burn_monitor.types import BurnEvent, BurnStats
from app.utils.formatters import (
    format_duration,
    format_token_amount,
    format_units,
    short_address,
)

MEDALS = ("🥇", "🥈", "🥉")

ZERO_ADDRESS = "0x" + "0" * 40
ZERO_TX_HASH = "0x" + "0" * 64


def _now(now: int | None) -> int:
    return int(time.time()) if now is None else now


def _time_since(timestamp: int | None, now: int) -> str:
    if not timestamp:
        return "N/A"
    return format_duration(now - timestamp)


def _average_interval(stats: BurnStats) -> str:
    if not stats.average_interval_seconds:
        return "N/A"
    return format_duration(stats.average_interval_seconds)


def _total_tokens(stats: BurnStats, settings: Settings) -> str:
    return format_token_amount(
        format_units(stats.total_amount_raw, settings.token_decimals)
    )


def _top_initiators(stats: BurnStats, settings: Settings, unit: str) -> str:
    lines = []
    for medal, initiator in zip(MEDALS, stats.top_initiators):
        url = f"{settings.explorer_url}/address/{initiator.address}"
        lines.append(
            f'{medal} <a href="{url}">{initiator.address[:10]}...</a> '
            f"- {initiator.transaction_count} {unit}"
        )
    return "\n".join(lines)


def format_burn_alert(
    event: BurnEvent,
    stats: BurnStats,
    settings: Settings,
    now: int | None = None,
) -> str:
    """
    Format a burn alert for the channel.

    Args:
        event: Burn being announced
        stats: Aggregate statistics before this burn was recorded
        settings: Explorer and dashboard links
        now: Unix time used for "time since" (defaults to current time)

    Returns:
        HTML message
    """
    tx_url = f"{settings.explorer_url}/tx/{event.tx_hash}"
    initiator_url = f"{settings.explorer_url}/address/{event.initiator}"

    return f"""🏆 <b>Token Transfer Detected</b>

📁 <b>Most Recent Transaction</b>
<b>Initiator:</b> <a href="{initiator_url}">{short_address(event.initiator)}</a>
<b>Transaction Hash:</b> <a href="{tx_url}">{event.tx_hash[:10]}...</a>

<b>Time Since Last Transaction:</b> {_time_since(stats.last_burn_timestamp, _now(now))}

📊 <b>Aggregate Statistics</b>
<b>Total Tokens Sent:</b> {_total_tokens(stats, settings)} tokens
<b>Total Transactions:</b> {stats.burn_count}
<b>Average Time Between:</b> {_average_interval(stats)}
<b>Total Initiators:</b> {stats.unique_initiator_count}

<b>Top 3 Initiators:</b>
{_top_initiators(stats, settings, "transactions")}

💎 <a href="{tx_url}">Ethereum (ETH) Blockchain Explorer</a>
📈 <a href="{settings.site_url}">View TokenJar Dashboard</a>"""


def format_stats_message(
    stats: BurnStats, settings: Settings, now: int | None = None
) -> str:
    """Format the /stats reply."""
    symbol = settings.token_symbol
    top = _top_initiators(stats, settings, "burns") or "No burns recorded yet"

    return f"""📊 <b>{symbol} Burn Statistics</b>

<b>Total {symbol} Burned:</b> {_total_tokens(stats, settings)} {symbol}
<b>Total Burns:</b> {stats.burn_count}
<b>Average Time Between:</b> {_average_interval(stats)}
<b>Unique Searchers:</b> {stats.unique_initiator_count}
<b>Time Since Last Burn:</b> {_time_since(stats.last_burn_timestamp, _now(now))}

<b>Top Searchers:</b>
{top}

📈 <a href="{settings.site_url}">TokenJar Dashboard</a>"""


def format_mock_burn_alert(
    stats: BurnStats, settings: Settings, now: int | None = None
) -> str:
    """Format the /test reply: a burn alert preview with placeholder tx."""
    symbol = settings.token_symbol
    explorer = settings.explorer_url
    threshold = format_token_amount(
        format_units(settings.amount_threshold, settings.token_decimals)
    )
    top = _top_initiators(stats, settings, "burns") or "No burns recorded yet"

    return f"""🧪 <b>TEST: {symbol} Burn Detected</b>

📁 <b>Latest Burn</b>
<b>Searcher:</b> <a href="{explorer}/address/{ZERO_ADDRESS}">{short_address(ZERO_ADDRESS)}</a>
<b>Transaction:</b> <a href="{explorer}/tx/{ZERO_TX_HASH}">{ZERO_TX_HASH[:10]}...</a>
<b>Amount:</b> {threshold} {symbol}

<b>Time Since Last Burn:</b> {_time_since(stats.last_burn_timestamp, _now(now))}

📊 <b>Aggregate Statistics</b>
<b>Total {symbol} Burned:</b> {_total_tokens(stats, settings)} {symbol}
<b>Total Burns:</b> {stats.burn_count}
<b>Average Time Between:</b> {_average_interval(stats)}
<b>Unique Searchers:</b> {stats.unique_initiator_count}

<b>Top Searchers:</b>
{top}

💎 <a href="{explorer}/tx/{ZERO_TX_HASH}">View on Etherscan</a>
📈 <a href="{settings.site_url}">TokenJar Dashboard</a>"""


def format_startup_message(settings: Settings) -> str:
    """Format the message posted when the bot comes online."""
    symbol = settings.token_symbol
    return f"""🤖 <b>{symbol} Burn Bot Online</b>

Monitoring {symbol} token burns to Firepit and 0xdead addresses.
Alerts will be posted here when burns are detected.

📈 <a href="{settings.site_url}">View TokenJar Dashboard</a>"""


def format_error_message(error: str) -> str:
    """Format an error report for the channel. The error text is escaped."""
    return f"""⚠️ <b>Bot Error</b>

{html.escape(error)}

The bot will continue attempting to monitor burns."""
