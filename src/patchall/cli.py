# src/patchall/cli.py

import click
import sys

from patchall import __version__
from patchall.build import build_package
from patchall.config import PatchConfig
from patchall.errors import NotFoundError, PatchallError, PermissionApplyError
from patchall.masterlog import emit_run_header, setup_master_log
from patchall.patch import patch_system
from patchall.restore import restore_system
from patchall.status import report_drift


def _fail(e: PatchallError):
    if isinstance(e, PermissionApplyError):
        click.echo(f"❌ Fatal: {e}", err=True)
        click.echo("   Stopping: the path above may have partially applied ownership/permissions.", err=True)
    else:
        click.echo(f"❌ {e}", err=True)
    raise click.Abort()


def _run_phase(func, config: PatchConfig, **kwargs):
    """Run one phase, turning run-stopping errors into a failed exit."""
    try:
        return func(config, **kwargs)
    except PatchallError as e:
        _fail(e)


@click.group(invoke_without_command=True)
@click.version_option(__version__)
@click.option("--root", type=click.Path(file_okay=False), default=None,
              help="Patch root holding manifest.cfg, manifest, files/ and backup/ (default: $PATCHALL_ROOT or cwd).")
@click.pass_context
def cli(ctx, root):
    """Patchall — build, apply, and roll back file patches"""
    setup_master_log()
    emit_run_header()
    ctx.obj = PatchConfig.from_root(root)
    if ctx.invoked_subcommand is None:
        ctx.invoke(menu_cmd)


@cli.command("build")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt.")
@click.pass_obj
def build_cmd(config, yes):
    """Build the package and manifest from manifest.cfg."""
    if not yes and not click.confirm("Proceed with building a patch?"):
        click.echo("Aborted.")
        return
    _run_phase(build_package, config)


@cli.command("patch")
@click.option("--dry-run", is_flag=True, help="Report what would be patched without changing anything.")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt.")
@click.pass_obj
def patch_cmd(config, dry_run, yes):
    """Replace missing or stale files with the packaged copies."""
    if not dry_run and not yes:
        click.echo("⚠️  WARNING: This will modify files on disk!")
        if not click.confirm("Proceed with patching?"):
            click.echo("Aborted.")
            return
    _run_phase(patch_system, config, dry_run=dry_run)


@cli.command("restore")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt.")
@click.pass_obj
def restore_cmd(config, yes):
    """Restore patched files to their pre-patch state."""
    if not yes and not click.confirm("Proceed with restoring files to their pre-patched state?"):
        click.echo("Aborted.")
        return
    _run_phase(restore_system, config)


@cli.command("status")
@click.pass_obj
def status_cmd(config):
    """Show tracked files that are missing or differ from the package."""
    report = _run_phase(report_drift, config)
    if report["missing"] or report["stale"]:
        sys.exit(2)


MENU_ACTIONS = {
    "1": ("Build", "Proceed with building a patch?", build_package),
    "2": ("Patch", "Proceed with patching?", patch_system),
    "3": ("Restore", "Proceed with restoring files to their pre-patched state?", restore_system),
}


@cli.command("menu")
@click.pass_context
def menu_cmd(ctx):
    """Interactive Build / Patch / Restore menu."""
    config = ctx.obj
    while True:
        click.echo(f"Patching Utility Main Menu ({sys.platform})")
        for key, (label, _, _) in MENU_ACTIONS.items():
            click.echo(f"\t{key}. {label}")
        click.echo("\t4. Exit")
        choice = click.prompt("Select an option", default="", show_default=False).strip()

        if choice == "4":
            click.echo("Bye!")
            ctx.exit(0)
        if choice not in MENU_ACTIONS:
            click.echo("Invalid option, try again!\n")
            continue

        _, question, func = MENU_ACTIONS[choice]
        if not click.confirm(question):
            click.echo()
            continue
        try:
            func(config)
        except NotFoundError as e:
            click.echo(f"❌ {e}", err=True)
        except PatchallError as e:
            _fail(e)
        click.echo()
