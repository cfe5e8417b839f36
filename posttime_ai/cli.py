from __future__ import annotations

import sys
import json
import logging

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from .config import load_config, get_youtube_config, get_analysis_config
from .errors import GatewayError, NotFoundError, PostTimeError
from .ingestion.gateway import YouTubeGateway
from .ingestion.resolver import ChannelResolver, match_rule
from .ingestion.fetcher import ChannelFetcher
from .ingestion.pipeline import AnalysisPipeline
from .models import DAY_NAMES
from .utils.channel_cache import LastChannelCache
from .utils.logging_config import setup_logging

console = Console()
logger = logging.getLogger(__name__)

HEAT_SHADES = " ░▒▓█"


def _build_pipeline(config: dict, timezone: str = None) -> AnalysisPipeline:
    """Construct gateway, resolver, fetcher and pipeline from config."""
    yt_cfg = get_youtube_config(config)
    analysis_cfg = get_analysis_config(config)

    gateway = YouTubeGateway(
        api_key=yt_cfg["api_key"],
        base_url=yt_cfg["base_url"],
        timeout=yt_cfg["timeout"],
        max_retries=yt_cfg["max_retries"],
        retry_base_delay=yt_cfg["retry_base_delay"],
    )
    fetcher = ChannelFetcher(
        gateway,
        video_limit=yt_cfg["video_limit"],
        # Both calls plus retries; each HTTP request still has its own timeout
        timeout=yt_cfg["timeout"] * (yt_cfg["max_retries"] + 1) * 2,
    )

    return AnalysisPipeline(
        resolver=ChannelResolver(gateway),
        fetcher=fetcher,
        channel_cache=LastChannelCache(config["cache_path"]),
        timezone=timezone or analysis_cfg["timezone"],
        top_n=analysis_cfg["top_n"],
        min_sample_size=analysis_cfg["min_sample_size"],
        trend_limit=analysis_cfg["trend_limit"],
        top_videos_limit=analysis_cfg["top_videos_limit"],
    )


def _fail(error: Exception):
    """Print a user-facing error and exit non-zero."""
    if isinstance(error, NotFoundError):
        console.print(f"[red]Error:[/red] No channel found for '{error.input}'.")
        console.print(f"  {error.hint}")
    elif isinstance(error, GatewayError) and error.status_code == 403:
        console.print(
            "[red]Error:[/red] YouTube refused the request (403). "
            "Check YOUTUBE_API_KEY and your daily quota."
        )
    else:
        console.print(f"[red]Error:[/red] {error}")
    sys.exit(1)


def _run_pipeline(pipeline: AnalysisPipeline, channel: str, limit: int = None, quiet: bool = False):
    report = None
    try:
        if quiet:
            return pipeline.run(channel, limit)
        with console.status("[bold]Resolving channel...[/bold]") as status:
            for event in pipeline.analyze(channel, limit):
                if event["event"] == "resolved":
                    status.update(f"[bold]Fetching videos for {event['channel_id']}...[/bold]")
                elif event["event"] == "fetched":
                    status.update(
                        f"[bold]Analyzing {event['videos']} videos from {event['channel']}...[/bold]"
                    )
                elif event["event"] == "complete":
                    report = event["report"]
    except (PostTimeError, ValueError) as e:
        _fail(e)
    except Exception as e:
        logger.exception("Channel analysis failed")
        _fail(e)
    return report


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, verbose):
    """PostTime-AI - Find the best times to publish on a YouTube channel."""
    ctx.ensure_object(dict)
    config = load_config()
    if verbose:
        config["log_level"] = "DEBUG"
    setup_logging(config.get("log_file"), config["log_level"])
    ctx.obj["config"] = config


@cli.command()
@click.argument("channel")
@click.pass_context
def resolve(ctx, channel):
    """Print the canonical channel ID for CHANNEL.

    \b
    Examples:
        posttime resolve @mkbhd
        posttime resolve https://www.youtube.com/c/veritasium
        posttime resolve UCxxxxxxxxxxxxxxxxxxxxxx
    """
    # IDs already in the input need no API key or network call
    rule, value = match_rule(channel.strip())
    if rule is not None and rule.strategy == "direct":
        console.print(value)
        return

    config = ctx.obj["config"]
    try:
        pipeline = _build_pipeline(config)
        channel_id = pipeline.resolve(channel)
    except (PostTimeError, ValueError) as e:
        _fail(e)
    console.print(channel_id)


@cli.command()
@click.argument("channel", required=False)
@click.option("--limit", "-n", type=int, default=None, help="Max recent videos to analyze")
@click.option("--timezone", "-z", default=None, help="Timezone for day/hour bucketing")
@click.option("--json", "as_json", is_flag=True, help="Print the full report as JSON")
@click.pass_context
def analyze(ctx, channel, limit, timezone, as_json):
    """Rank the best posting times for CHANNEL.

    CHANNEL can be a URL, @handle, legacy username or channel ID. When
    omitted, the last analyzed channel is used.

    \b
    Examples:
        posttime analyze @veritasium
        posttime analyze @veritasium --timezone Asia/Tokyo -n 50
        posttime analyze --json > report.json
    """
    config = ctx.obj["config"]
    try:
        pipeline = _build_pipeline(config, timezone)
    except (PostTimeError, ValueError) as e:
        _fail(e)

    report = _run_pipeline(pipeline, channel, limit, quiet=as_json)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        return

    channel_meta = report.channel
    console.print(
        Panel(
            f"[bold]{channel_meta.name}[/bold]  ({channel_meta.channel_id})\n"
            f"Subscribers: {channel_meta.subscriber_count:,}   "
            f"Total views: {channel_meta.total_views:,}   "
            f"Videos analyzed: {report.video_count}",
            title="Channel",
        )
    )

    if report.has_enough_data:
        table = Table(title=f"Best Posting Times ({report.timezone})")
        table.add_column("#", justify="right")
        table.add_column("Day")
        table.add_column("Hour", justify="right")
        table.add_column("Avg Views", justify="right")
        table.add_column("Avg Engagement", justify="right")
        table.add_column("Videos", justify="right")
        for slot in report.optimal_times:
            table.add_row(
                str(slot.rank),
                slot.day_name,
                f"{slot.hour:02d}:00",
                f"{slot.average_views:,}",
                f"{slot.average_engagement}%",
                str(slot.sample_size),
            )
        console.print(table)
    else:
        console.print(
            "[yellow]Not enough data:[/yellow] no time slot has 2 or more videos yet."
        )

    totals = report.totals
    weekly = report.weekly
    stats = Table(title="Channel Statistics")
    stats.add_column("Metric", style="bold")
    stats.add_column("Value", justify="right")
    stats.add_row("Total views", f"{totals['total_views']:,}")
    stats.add_row("Total likes", f"{totals['total_likes']:,}")
    stats.add_row("Total comments", f"{totals['total_comments']:,}")
    stats.add_row("Average views", f"{totals['average_views']:,}")
    stats.add_row("Average engagement", f"{totals['average_engagement']}%")
    stats.add_row("This week avg views", f"{weekly['average_views']:,} ({weekly['views_growth']:+}%)")
    stats.add_row(
        "This week engagement",
        f"{weekly['average_engagement']}% ({weekly['engagement_growth']:+}%)",
    )
    console.print(stats)

    if report.top_videos:
        top = Table(title="Top Videos")
        top.add_column("Title")
        top.add_column("Views", justify="right")
        top.add_column("Engagement", justify="right")
        for video in report.top_videos:
            top.add_row(video["title"], f"{video['views']:,}", f"{video['engagement']}%")
        console.print(top)


@cli.command()
@click.argument("channel", required=False)
@click.option("--timezone", "-z", default=None, help="Timezone for day/hour bucketing")
@click.pass_context
def heatmap(ctx, channel, timezone):
    """Show the day x hour view heatmap for CHANNEL (0-100 per cell)."""
    config = ctx.obj["config"]
    try:
        pipeline = _build_pipeline(config, timezone)
    except (PostTimeError, ValueError) as e:
        _fail(e)

    report = _run_pipeline(pipeline, channel)

    grid = {(cell.day, cell.hour): cell.value for cell in report.heatmap}
    table = Table(
        title=f"Views by Publish Time ({report.timezone})",
        box=None,
        padding=(0, 0),
        pad_edge=False,
    )
    table.add_column("Day  ")
    for hour in range(24):
        table.add_column(f"{hour:02d}", justify="center")

    for day, name in enumerate(DAY_NAMES):
        row = []
        for hour in range(24):
            value = grid[(day, hour)]
            shade = HEAT_SHADES[min(value * len(HEAT_SHADES) // 101, len(HEAT_SHADES) - 1)]
            row.append(shade * 2 if value else "")
        table.add_row(name[:3], *row)

    console.print(table)
    console.print("Cells are scaled against the busiest slot (= 100).")


@cli.command()
@click.option("--clear", is_flag=True, help="Forget the remembered channel")
@click.pass_context
def last(ctx, clear):
    """Show the last analyzed channel."""
    cache = LastChannelCache(ctx.obj["config"]["cache_path"])
    if clear:
        cache.clear()
        console.print("[green]Forgot the last channel.[/green]")
        return

    channel_id = cache.read()
    if not channel_id:
        console.print("[yellow]No channel analyzed yet.[/yellow]")
        console.print("Run: [bold]posttime analyze @ChannelName[/bold]")
        return
    console.print(channel_id)


if __name__ == "__main__":
    cli()
