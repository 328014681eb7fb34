#!/usr/bin/env python3
"""
Validate that pricing_scenarios_business_summary.md stays in sync with
test_integration_scenarios.py.

Every scenario class and test method must be referenced in the summary as
**Test Class**: `TestX` / **Test Method**: `test_x`, and every reference in
the summary must still exist in the test file.

Run: python scripts/validate_test_docs_sync.py
"""

import ast
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
TEST_FILE = PROJECT_ROOT / 'tests' / 'test_integration_scenarios.py'
DOC_FILE = PROJECT_ROOT / 'docs' / 'pricing_scenarios_business_summary.md'

CLASS_REFERENCE = re.compile(r'\*\*Test Class\*\*:\s*`(Test\w+)`')
METHOD_REFERENCE = re.compile(r'\*\*Test Method\*\*:\s*`(test_\w+)`')


def collect_scenarios(test_file: Path) -> dict[str, list[str]]:
    """Map each Test* class in the file to its test_* methods, in order."""
    tree = ast.parse(test_file.read_text())
    return {
        node.name: [
            item.name for item in node.body
            if isinstance(item, ast.FunctionDef) and item.name.startswith('test_')
        ]
        for node in tree.body
        if isinstance(node, ast.ClassDef) and node.name.startswith('Test')
    }


def collect_references(doc_file: Path) -> tuple[set[str], set[str]]:
    """Class and method names referenced in the business summary."""
    content = doc_file.read_text()
    return set(CLASS_REFERENCE.findall(content)), set(METHOD_REFERENCE.findall(content))


@dataclass
class SyncReport:
    scenarios: dict[str, list[str]]
    undocumented_classes: set[str] = field(default_factory=set)
    undocumented_methods: set[str] = field(default_factory=set)
    stale_classes: set[str] = field(default_factory=set)
    stale_methods: set[str] = field(default_factory=set)

    @property
    def in_sync(self) -> bool:
        return not (
            self.undocumented_classes or self.undocumented_methods
            or self.stale_classes or self.stale_methods
        )


def check_sync(test_file: Path = TEST_FILE, doc_file: Path = DOC_FILE) -> SyncReport:
    scenarios = collect_scenarios(test_file)
    doc_classes, doc_methods = collect_references(doc_file)
    methods = {method for names in scenarios.values() for method in names}

    return SyncReport(
        scenarios=scenarios,
        undocumented_classes=set(scenarios) - doc_classes,
        undocumented_methods=methods - doc_methods,
        stale_classes=doc_classes - set(scenarios),
        stale_methods=doc_methods - methods,
    )


def main():
    for path in (TEST_FILE, DOC_FILE):
        if not path.exists():
            print(f"❌ File not found: {path}")
            sys.exit(1)

    report = check_sync()
    documented_classes, documented_methods = collect_references(DOC_FILE)

    print("=" * 60)
    print("Pricing Scenario Documentation Sync")
    print("=" * 60)
    print(f"\nScenario classes: {len(report.scenarios)}")
    print(f"Documented classes: {len(documented_classes)}")
    print(f"Documented methods: {len(documented_methods)}")

    problems = [
        ("Undocumented class", report.undocumented_classes),
        ("Undocumented method", report.undocumented_methods),
        ("Documented class no longer exists", report.stale_classes),
        ("Documented method no longer exists", report.stale_methods),
    ]
    for label, names in problems:
        for name in sorted(names):
            print(f"   ❌ {label}: {name}")

    if report.in_sync:
        print("\n✅ All pricing scenarios are documented and in sync!")

    print("\nCoverage by Class:")
    for cls, methods in report.scenarios.items():
        print(f"\n  {'✅' if cls in documented_classes else '❌'} {cls}")
        for method in methods:
            print(f"      {'✅' if method in documented_methods else '❌'} {method}")

    sys.exit(0 if report.in_sync else 1)


if __name__ == '__main__':
    main()
