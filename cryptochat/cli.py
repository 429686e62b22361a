import argparse
import dataclasses
from datetime import datetime, timezone

from cryptochat.bootstrap import build_orchestrator
from cryptochat.conversation import replies
from cryptochat.core.logging import configure_logging
from cryptochat.core.models import ChartRequest
from cryptochat.core.settings import PRICE_PROVIDERS, get_settings

EXIT_WORDS = {"quit", "exit", "bye"}


def _describe_chart(chart: ChartRequest) -> str:
    first, last = chart.series[0], chart.series[-1]
    start = datetime.fromtimestamp(first.timestamp_ms / 1000, tz=timezone.utc)
    end = datetime.fromtimestamp(last.timestamp_ms / 1000, tz=timezone.utc)
    change = (last.price_usd - first.price_usd) / first.price_usd * 100 if first.price_usd else 0.0
    return (
        f"[chart] {chart.coin.label}: {len(chart.series)} points, "
        f"{start:%Y-%m-%d %H:%M} -> {end:%Y-%m-%d %H:%M} UTC, "
        f"${replies.format_usd(first.price_usd)} -> ${replies.format_usd(last.price_usd)} "
        f"({replies.format_change(change)})"
    )


def main() -> int:
    p = argparse.ArgumentParser(description="Chat with the crypto assistant from a terminal.")
    p.add_argument("--provider", choices=PRICE_PROVIDERS, help="override PRICE_PROVIDER")
    p.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    args = p.parse_args()

    settings = get_settings()
    if args.provider:
        settings = dataclasses.replace(settings, price_provider=args.provider)
    configure_logging(args.log_level or settings.log_level)

    orchestrator = build_orchestrator(settings)
    print(replies.GREETING)
    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line:
            continue
        if line.lower() in EXIT_WORDS:
            break
        reply = orchestrator.handle_utterance(line)
        print(reply.reply_text)
        if reply.chart_request is not None:
            print(_describe_chart(reply.chart_request))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
