import click
from typing import Optional

from litero import __version__
from litero.cli.handlers import download_story_handler


@click.group()
@click.version_option(__version__, prog_name='litero')
def litero():
    """A CLI tool for downloading Literotica stories and series."""
    pass


@litero.command()
@click.argument('story_url')
@click.option('-f', '--filename', default=None, help='Filename to save the story as. Defaults to the story slug.')
@click.option('-e', '--format', 'story_format', default=None, help='Format to save the story as: html, txt or md. Default comes from the config (html).')
@click.option('-c', '--classic', is_flag=True, default=False, help='Use the classic website layout.')
@click.option('-n', '--nopages', is_flag=True, default=False, help="Don't write page numbers in output.")
@click.option('-s', '--series', is_flag=True, default=False, help='Download every story of the series the story belongs to.')
@click.option('--nobr', is_flag=True, default=False, help='Join html pages with paragraph breaks instead of line breaks.')
@click.option('-t', '--template', default=None, help='Path to custom template file to use for the story.')
@click.option('-d', '--stream', is_flag=True, default=False, help='Stream the story to stdout instead of writing a file.')
@click.option('-o', '--output-dir', default=None, type=click.Path(), help='Directory to write the story to. Overrides the configured default.')
@click.option('--verbose', is_flag=True, default=False, help='Print verbose output.')
def download(
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
    """Downloads a story (or series) from STORY_URL."""
    download_story_handler(
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


if __name__ == '__main__':
    litero()
