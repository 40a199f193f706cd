"""
Catalog Builder - Loads the seed CSVs and checks catalog integrity.

The catalog (providers, plans, option groups, option values, add-ons) is
authored out-of-band as CSV files. This module:
- Reads the seed files into DataFrames
- Checks ids, references, prices and option-code uniqueness
- Generates a JSON build report
"""
import pandas as pd
import json
import hashlib
from datetime import datetime
from typing import Optional
from pathlib import Path

from ..config.settings import get_settings, Settings


SEED_FILES = {
    'providers': ('providers.csv', ['id', 'name', 'location', 'logo_url']),
    'plans': ('plans.csv', [
        'id', 'provider_id', 'name', 'description', 'base_price_cents',
        'currency', 'approval_type', 'min_participants', 'lead_time_days',
    ]),
    'option_groups': ('option_groups.csv', ['id', 'plan_id', 'code', 'description', 'required']),
    'option_values': ('option_values.csv', ['id', 'option_group_id', 'value', 'price_cents', 'currency']),
    'addons': ('addons.csv', ['id', 'plan_id', 'name', 'price_cents', 'currency']),
}

APPROVAL_TYPES = ('none', 'manager_review')
REQUIRED_FLAGS = ('true', 'false')


def get_file_hash(path: Path) -> str:
    """Get SHA256 hash of a file."""
    if not path.exists():
        return ""
    with open(path, 'rb') as f:
        return hashlib.sha256(f.read()).hexdigest()[:12]


def read_seed_csv(path: Path) -> pd.DataFrame:
    """Read a seed CSV as strings, with blanks instead of NaN and stripped cells."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()
    return df


def load_seed_frames(seed_dir: Path) -> tuple[dict[str, pd.DataFrame], list[str]]:
    """
    Load every seed file that exists.

    Returns (frames, errors). Missing files and missing columns are errors;
    the frame is left out so later checks can skip it.
    """
    frames: dict[str, pd.DataFrame] = {}
    errors: list[str] = []

    for name, (filename, columns) in SEED_FILES.items():
        path = seed_dir / filename
        if not path.exists():
            errors.append(f"{filename} not found in {seed_dir}")
            continue
        df = read_seed_csv(path)
        missing = [c for c in columns if c not in df.columns]
        if missing:
            errors.append(f"{filename} is missing columns: {', '.join(missing)}")
            continue
        frames[name] = df

    return frames, errors


def _check_unique_ids(frames: dict[str, pd.DataFrame], errors: list[str]):
    for name, df in frames.items():
        dupes = df.loc[df['id'].duplicated(), 'id'].unique()
        if len(dupes) > 0:
            errors.append(f"Duplicate {name} ids: {', '.join(dupes)}")


def _check_reference(
    frames: dict[str, pd.DataFrame],
    child: str,
    column: str,
    parent: str,
    errors: list[str],
):
    if child not in frames or parent not in frames:
        return
    known = set(frames[parent]['id'])
    dangling = frames[child][~frames[child][column].isin(known)]
    for _, row in dangling.iterrows():
        errors.append(f"{child} {row['id']} references unknown {column} '{row[column]}'")


def _check_prices(df: pd.DataFrame, name: str, column: str, allow_blank: bool, errors: list[str]):
    for _, row in df.iterrows():
        raw = row[column]
        if raw == '' and allow_blank:
            continue
        if not raw.isdecimal():
            errors.append(f"{name} {row['id']} has invalid {column} '{raw}' (expected non-negative integer)")


def check_catalog_integrity(frames: dict[str, pd.DataFrame]) -> tuple[list[str], list[str]]:
    """
    Check a loaded catalog.

    Returns (errors, warnings). Errors make the catalog unusable; warnings
    flag data that prices fine but is probably unintended.
    """
    errors: list[str] = []
    warnings: list[str] = []

    _check_unique_ids(frames, errors)

    _check_reference(frames, 'plans', 'provider_id', 'providers', errors)
    _check_reference(frames, 'option_groups', 'plan_id', 'plans', errors)
    _check_reference(frames, 'option_values', 'option_group_id', 'option_groups', errors)
    _check_reference(frames, 'addons', 'plan_id', 'plans', errors)

    if 'plans' in frames:
        plans = frames['plans']
        _check_prices(plans, 'plan', 'base_price_cents', False, errors)
        bad_approval = plans[~plans['approval_type'].isin(APPROVAL_TYPES)]
        for _, row in bad_approval.iterrows():
            errors.append(f"plan {row['id']} has unknown approval_type '{row['approval_type']}'")

    if 'addons' in frames:
        _check_prices(frames['addons'], 'addon', 'price_cents', False, errors)
    if 'option_values' in frames:
        _check_prices(frames['option_values'], 'option value', 'price_cents', True, errors)

    if 'option_groups' in frames:
        groups = frames['option_groups']
        dupes = groups[groups.duplicated(subset=['plan_id', 'code'], keep='first')]
        for _, row in dupes.iterrows():
            errors.append(f"plan {row['plan_id']} defines option code '{row['code']}' more than once")

        bad_required = groups[~groups['required'].str.lower().isin(REQUIRED_FLAGS)]
        for _, row in bad_required.iterrows():
            errors.append(
                f"option group {row['id']} has invalid required flag '{row['required']}' (expected true or false)"
            )

        if 'option_values' in frames:
            used = set(frames['option_values']['option_group_id'])
            for _, row in groups[~groups['id'].isin(used)].iterrows():
                errors.append(f"option group {row['id']} ({row['code']}) has no values")

    # Currency consistency against the owning plan
    if 'plans' in frames:
        plan_currency = dict(zip(frames['plans']['id'], frames['plans']['currency']))

        if 'addons' in frames:
            for _, row in frames['addons'].iterrows():
                expected = plan_currency.get(row['plan_id'])
                if expected and row['currency'] != expected:
                    warnings.append(
                        f"addon {row['id']} is priced in {row['currency']} but plan {row['plan_id']} uses {expected}"
                    )

        if 'option_groups' in frames and 'option_values' in frames:
            group_plan = dict(zip(frames['option_groups']['id'], frames['option_groups']['plan_id']))
            for _, row in frames['option_values'].iterrows():
                expected = plan_currency.get(group_plan.get(row['option_group_id'], ''))
                if row['currency'] and expected and row['currency'] != expected:
                    warnings.append(
                        f"option value {row['id']} is priced in {row['currency']} but its plan uses {expected}"
                    )

    return errors, warnings


def build_catalog(settings: Optional[Settings] = None, verbose: bool = True) -> dict:
    """
    Check the seed catalog and write a build report.

    Args:
        settings: Optional settings override
        verbose: Print progress messages

    Returns:
        Build report dictionary
    """
    settings = settings or get_settings()
    seed_dir = settings.seed_dir

    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "seed_dir": str(seed_dir),
        "input_files": {},
        "metrics": {},
        "warnings": [],
        "errors": []
    }

    for name, (filename, _) in SEED_FILES.items():
        path = seed_dir / filename
        report["input_files"][name] = {
            "path": str(path),
            "hash": get_file_hash(path)
        }

    frames, load_errors = load_seed_frames(seed_dir)
    report["errors"].extend(load_errors)

    errors, warnings = check_catalog_integrity(frames)
    report["errors"].extend(errors)
    report["warnings"].extend(warnings)

    for name, df in frames.items():
        report["metrics"][f"{name}_count"] = len(df)
        if verbose:
            print(f"Loaded {len(df)} {name}")

    if 'option_groups' in frames:
        groups = frames['option_groups']
        report["metrics"]["required_option_groups"] = int((groups['required'].str.lower() == 'true').sum())

    report["status"] = "failed" if report["errors"] else "success"

    if verbose:
        for warning in report["warnings"]:
            print(f"WARNING: {warning}")
        for error in report["errors"]:
            print(f"ERROR: {error}")
        print(f"\nCATALOG CHECK {report['status'].upper()}: {seed_dir}")

    # Save build report
    report_path = settings.build_report
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with open(report_path, 'w') as f:
        json.dump(report, f, indent=2)

    if verbose:
        print(f"Build report saved to: {report_path}")

    return report


if __name__ == "__main__":
    build_catalog()
