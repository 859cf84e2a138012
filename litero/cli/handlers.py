import os
from typing import Optional

import click

from litero.core.events import ProgressEvent
from litero.core.fetchers.page_fetcher import PageFetcher
from litero.core.orchestrator import fetch_story as call_orchestrator_fetch_story
from litero.cli.contexts import DownloadStoryContext
from litero.utils.logger import get_logger

logger = get_logger(__name__)

FILE_SUCCESS_FORMAT = "File was written to *{}*"
FILE_ERROR_FORMAT = "Following error occurred while attempting to write the file: {}"


def save_to_file(data: str, filename: str) -> bool:
    try:
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(filename, 'w', encoding='utf-8') as f:
            f.write(data)
    except OSError as e:
        click.echo(click.style(FILE_ERROR_FORMAT.format(e), fg="red"), err=True)
        logger.error(f"Failed to write {filename}: {e}", exc_info=True)
        return False
    click.echo(FILE_SUCCESS_FORMAT.format(filename))
    logger.info(f"Wrote {len(data)} characters to {filename}")
    return True


def download_story_handler(
    story_url: str,
    filename: Optional[str],
    story_format: Optional[str],
    classic: bool,
    nopages: bool,
    series: bool,
    nobr: bool,
    template: Optional[str],
    stream: bool,
    output_dir: Optional[str],
    verbose: bool,
):
    # display_progress stays in the handler as it's UI related
    def display_progress(event: ProgressEvent) -> None:
        if not (verbose or event.force):
            return
        message = event.formatted()
        if event.status == "error":
            click.echo(click.style(message, fg="yellow"), err=True)
        else:
            click.echo(message)

    def display_error(message: str) -> None:
        click.echo(click.style(message, fg="red"), err=True)

    # 1. Instantiate Context
    context = DownloadStoryContext(
        story_url=story_url,
        filename=filename,
        story_format=story_format,
        classic=classic,
        nopages=nopages,
        series=series,
        nobr=nobr,
        template=template,
        stream=stream,
        output_dir=output_dir,
        verbose=verbose,
    )

    for msg in context.warning_messages:
        click.echo(click.style(msg, fg="yellow"), err=True)

    if not context.is_valid():
        for msg in context.error_messages:
            click.echo(click.style(msg, fg="red"), err=True)
        logger.error(f"DownloadStoryContext validation failed. Errors: {context.error_messages}")
        return

    logger.info(f"CLI handler initiated download for {context.story_url} to {context.output_dir}")

    try:
        # 2. Call Orchestrator with prepared context
        outcome = call_orchestrator_fetch_story(
            **context.get_orchestrator_kwargs(),
            progress_callback=display_progress,
            error_callback=display_error,
            fetcher=PageFetcher(timeout=context.timeout),
        )

        # 3. Stream or write the result
        if outcome is None:
            logger.warning(f"Download for {story_url} was rejected. See the reported error.")
            return

        if context.stream:
            if verbose:
                click.echo("The option stream was provided, streaming ~~~~~~~~~~~~")
            click.echo(outcome.content)
            return

        save_to_file(outcome.content, context.output_path(outcome.filename))

    except Exception as e:
        click.echo(f"An unexpected error occurred in the CLI handler: {e}", err=True)
        logger.error(f"CLI handler caught an unexpected error during download of {story_url}: {e}", exc_info=True)
