"""
File Handler Tool — exports offers to CSV and builds a text summary.
"""

import csv
import os
from statistics import median

from models.offer import STANDARD_FIELDS


def save_to_csv(offers: list[dict], filepath: str) -> str:
    """
    Save offers to a CSV file.

    Args:
        offers: List of offer dicts to save.
        filepath: Destination file; its directory is created if needed.

    Returns:
        Path to the saved file.
    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(STANDARD_FIELDS), extrasaction="ignore")
        writer.writeheader()
        writer.writerows(offers)

    return filepath


def generate_summary(offers: list[dict], top: int = 10) -> str:
    """
    Generate a human-readable summary of the dataset.

    Args:
        offers: List of offer dicts.
        top: How many companies to list.

    Returns:
        Formatted summary string.
    """
    if not offers:
        return "No offers found."

    # Total compensation figures by company
    companies = {}
    for offer in offers:
        company = offer.get("company") or "Unknown"
        companies.setdefault(company, []).append(offer.get("total_offer"))

    lines = [
        f"{'=' * 50}",
        f"  COMPENSATION DATASET SUMMARY",
        f"{'=' * 50}",
        f"  Total offers: {len(offers)}",
        f"",
        f"  Top companies (offers, median total comp):",
    ]
    ranked = sorted(companies.items(), key=lambda x: -len(x[1]))[:top]
    for company, totals in ranked:
        known = [value for value in totals if isinstance(value, (int, float))]
        median_tc = f"{median(known):,.0f}" if known else "n/a"
        lines.append(f"    - {company}: {len(totals)} ({median_tc})")

    lines.append(f"{'=' * 50}")

    return "\n".join(lines)
