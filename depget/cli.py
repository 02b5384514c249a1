from __future__ import annotations

import builtins

import click
from click import Context
from click_aliases import ClickAliasedGroup

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"], max_content_width=800)


def init_depget(**kwargs):
    import logging

    from depget.args.base_args import BaseArgs
    from depget.args.base_args import DepgetArgs
    from depget.logger import Logger

    # Initialize the depget args to be globally available
    DepgetArgs.init(**kwargs)
    # Initialize logger that prints to rich console
    Logger.setup_logger(logging.DEBUG if BaseArgs.get().verbose else logging.INFO)


@click.group(cls=ClickAliasedGroup, context_settings=CONTEXT_SETTINGS)
@click.pass_context
def cli(ctx: Context, **kwargs):
    pass


@cli.command(aliases=["g"])
@click.argument("packages", nargs=-1, required=False)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Give more output.")
@click.option(
    "-u",
    "--update",
    is_flag=True,
    default=False,
    help="Use the network to update the named packages and their dependencies, even if they are already present.",
)
@click.option(
    "-n",
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the version control commands that would be executed, but do not run them.",
)
@click.option("-t", "--tree", is_flag=True, default=False, help="Print the dependency tree of the fetched packages.")
@click.pass_context
def get(ctx: Context, **kwargs):
    """
    Download PACKAGES along with their dependencies.

    PACKAGES are import paths like github.com/user/project, local paths like ./sub
    or patterns containing '...'. Without PACKAGES, the package in the current directory is used.
    Checked out repositories are synced to the tag matching the configured toolchain version.
    """
    from configparser import InterpolationMissingOptionError

    from depget.actions.get import get
    from depget.config.main_cfg import MainConfig
    from depget.errors import GetFailedException
    from depget.logger import Logger

    init_depget(**kwargs)

    try:
        get(builtins.list(kwargs["packages"]), **kwargs)
    except GetFailedException as e:
        if kwargs["verbose"]:
            Logger.get_console().print_exception()
        Logger.print_package_errors(e.errors)
        ctx.exit(1)
    except InterpolationMissingOptionError as e:
        if kwargs["verbose"]:
            Logger.get_console().print_exception()

        p = MainConfig.get_configs_dir()
        Logger.get_console().print("[bold red]" + e.message)

        fix_msg = "To fix this, do one of the following:\n"
        fix_msg += f"  - check if you are running depget with the correct env vars\n"
        fix_msg += (
            f"  - adapt the option '{e.option}' under section '[{e.section}]' in the config files at [b]{p}[/b]\n"
        )

        Logger.get_console().print(fix_msg)
        ctx.exit(1)
    except KeyboardInterrupt:
        Logger.get_console().print("Keyboard interrupt at CLI...")
        ctx.exit(130)


if __name__ == "__main__":
    cli()
