"""
================================================================================
Allure Report Utilities
================================================================================

Helpers for enriching Allure reports produced by the storefront suite.

Features:
- Attachment helpers (text, JSON, PNG)
- Generation of the HTML report from a results directory

================================================================================
"""

import json
import subprocess
from pathlib import Path
from typing import Any, Union

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data") -> None:
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text") -> None:
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_png(source: Union[bytes, Path, str], name: str = "Screenshot") -> None:
    """Attach PNG bytes or a PNG file to Allure report."""
    if isinstance(source, (str, Path)):
        with open(source, "rb") as f:
            source = f.read()
    allure.attach(
        source,
        name=name,
        attachment_type=allure.attachment_type.PNG
    )


# ================================================================================
# Report Generation
# ================================================================================

def generate_report(results_dir: Path, report_dir: Path) -> bool:
    """
    Generate Allure HTML report.

    Args:
        results_dir: Allure results directory
        report_dir: Output report directory

    Returns:
        True if successful
    """
    cmd = [
        "allure", "generate",
        str(results_dir),
        "-o", str(report_dir),
        "--clean"
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        logger.warning("Allure CLI not found. Please install Allure to generate reports.")
        return False

    if result.returncode == 0:
        logger.info(f"Report generated at {report_dir}")
        return True

    logger.error(f"Report generation failed: {result.stderr}")
    return False


__all__ = [
    "attach_json",
    "attach_text",
    "attach_png",
    "generate_report",
]
