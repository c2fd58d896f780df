from rich.console import Console

from patchall.config import PatchConfig
from patchall.engine import Decision, DiffEngine
from patchall.manifest import ManifestStore

console = Console()


def report_drift(config: PatchConfig) -> dict:
    """
    Compare every manifest record with the live system without changing anything.

    Returns:
        {"missing": [...], "stale": [...], "skipped": [...], "intact": int}
    """
    console.rule("[🔍] Checking Drift")

    records = ManifestStore(config.manifest).load()
    engine = DiffEngine(config)
    report = {"missing": [], "stale": [], "skipped": [], "intact": 0}

    for record in records:
        outcome = engine.decide_patch(record)
        if outcome.decision is Decision.REPLACE:
            report[outcome.reason].append(record.path)
        elif outcome.decision is Decision.NOOP:
            report["intact"] += 1
        else:
            report["skipped"].append(record.path)

    for path in report["missing"]:
        console.print(f"❌ MISSING: {path}")
    for path in report["stale"]:
        console.print(f"❌ STALE: {path}")
    for path in report["skipped"]:
        console.print(f"⚠️  SKIPPED: {path}")

    if not report["missing"] and not report["stale"]:
        console.print(f"✅ All {report['intact']} tracked entries match the package.")
    return report
