"""Command-line interface for imgtag."""

import json
from pathlib import Path

import click
import frontmatter
import markdown
import yaml

from .config import CONFIG_DIR, CONFIG_FILE, DEFAULT_CONFIG_CONTENT, Config
from .dimensions import make_dimension_lookup
from .logging import setup_logging
from .markdown_ext import IMG_TAG_PATTERN, ImageTagExtension
from .parser import parse as parse_markup
from .render import ERROR_MESSAGE, render_markup


def load_config(site_root: str | None, no_probe: bool) -> Config:
    """Load config from .imgtag/config.toml and apply command-line overrides."""
    config = Config.find_and_load()
    if site_root is not None:
        config.render.site_root = site_root
    if no_probe:
        config.lookup.enabled = False
    return config


def replace_tags(content: str, config: Config) -> str:
    """Replace every {% img %} tag in content with its rendered HTML."""
    lookup = make_dimension_lookup(config)

    def replace(match):
        return render_markup(
            match.group("markup"),
            dimension_lookup=lookup,
            site_root=config.render.site_root,
        )

    return IMG_TAG_PATTERN.sub(replace, content)


def render_page(content: str, config: Config) -> str:
    """Render markdown content to HTML with the img tag extension."""
    md = markdown.Markdown(
        extensions=[
            "extra",
            ImageTagExtension(
                site_root=config.render.site_root,
                dimension_lookup=make_dimension_lookup(config),
                probe_dimensions=config.lookup.enabled,
            ),
        ]
    )
    return md.convert(content)


site_root_option = click.option(
    "--site-root", default=None, help="Prefix for sources that are not http(s) URLs"
)
no_probe_option = click.option(
    "--no-probe", is_flag=True, help="Don't look up image sizes for captions"
)
verbose_option = click.option("--verbose", "-v", is_flag=True, help="Verbose output")


@click.group()
@click.version_option()
def main():
    """imgtag - render {% img %} tags to HTML."""
    pass


@main.command()
@click.argument("markup")
def parse(markup: str):
    """Show the attributes parsed from tag markup."""
    attrs = parse_markup(markup)
    if attrs is None:
        click.echo(ERROR_MESSAGE, err=True)
        raise SystemExit(1)

    click.echo(json.dumps(attrs.to_dict(), indent=2))


@main.command()
@click.argument("markup")
@site_root_option
@no_probe_option
@verbose_option
def render(markup: str, site_root: str | None, no_probe: bool, verbose: bool):
    """Render tag markup to HTML."""
    setup_logging(verbose=verbose)
    config = load_config(site_root, no_probe)

    click.echo(
        render_markup(
            markup,
            dimension_lookup=make_dimension_lookup(config),
            site_root=config.render.site_root,
        )
    )


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o", type=click.Path(path_type=Path), help="Write to file instead of stdout"
)
@click.option("--html", is_flag=True, help="Render the page markdown to HTML")
@site_root_option
@no_probe_option
@verbose_option
def convert(
    source: Path,
    output: Path | None,
    html: bool,
    site_root: str | None,
    no_probe: bool,
    verbose: bool,
):
    """Replace every {% img %} tag in a page."""
    setup_logging(verbose=verbose)
    config = load_config(site_root, no_probe)

    try:
        post = frontmatter.load(str(source))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        click.echo(f"Error: Could not read {source}: {e}", err=True)
        raise SystemExit(1)

    if html:
        result = render_page(post.content, config)
    else:
        post.content = replace_tags(post.content, config)
        result = frontmatter.dumps(post) if post.metadata else post.content

    if output is None:
        click.echo(result)
    else:
        output.write_text(result + "\n", encoding="utf-8")
        click.echo(f"Wrote {output}", err=True)


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing files")
def init(force: bool):
    """Create a default .imgtag/config.toml."""
    config_dir = Path.cwd() / CONFIG_DIR
    config_file = config_dir / CONFIG_FILE

    if config_file.exists() and not force:
        click.echo(f"Error: {CONFIG_DIR}/{CONFIG_FILE} already exists", err=True)
        click.echo("Use --force to overwrite", err=True)
        raise SystemExit(1)

    config_dir.mkdir(exist_ok=True)
    config_file.write_text(DEFAULT_CONFIG_CONTENT)
    click.echo(f"Created {config_file}")


if __name__ == "__main__":
    main()
