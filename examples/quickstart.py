"""Quickstart example for lexidict.

This example compiles the dictionary in `i18n/` (a root file plus nested
modules), loads the generated module and dispatches on a few locales.

Note: Example 4 needs the optional Babel extra (`pip install lexidict[babel]`).
"""

from pathlib import Path

from lexidict import DictCheckError, compile_file, load_dictionary, load_source
from lexidict.diagnostics import DiagnosticFormatter, OutputFormat

HERE = Path(__file__).parent

# Example 1: Load a dictionary from disk
print("=" * 50)
print("Example 1: Load a Dictionary")
print("=" * 50)

i18n = load_dictionary(HERE / "i18n" / "app.lexi", module_name="quickstart_i18n")
Locale, EnRegion = i18n.Locale, i18n.EnRegion

for locale in Locale.all_locales():
    d = i18n.new(locale)
    print(f"{locale.tag:6} {d.greeting('Ada'):16} {d.item_count(0)}")
# Output:
# de     Hallo Ada!       0 Artikel
# en_GB  Hello Ada!       no items
# en_US  Howdy Ada!       0 items

# Example 2: Nested modules and typed units
print("\n" + "=" * 50)
print("Example 2: Nested Modules")
print("=" * 50)

d = i18n.new(Locale.De())
print(d.errors.generic(404))
print(d.errors.http.not_found("/index.html"))
print(d.errors.http.retry_after(30))
print(repr(d.errors.http))
# Output:
# Fehler 404
# /index.html wurde nicht gefunden
# (30, 'Sekunden')
# Dict.errors.http(Locale.De())

# Example 3: Warnings and the missing-translation fallback
print("\n" + "=" * 50)
print("Example 3: Warnings")
print("=" * 50)

result = compile_file(HERE / "i18n" / "app.lexi")
formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
for warning in result.warnings:
    print(formatter.format(warning))
print(d.colour())
# Output:
# .../i18n/app.lexi:25:6: MISSING_TRANSLATION: Translation unit 'colour' does not cover every locale
# <missing translation>

# Example 4: Locale tags (Babel)
print("\n" + "=" * 50)
print("Example 4: Locale Tags")
print("=" * 50)

print(Locale.from_tag("en-GB"))
print(repr(Locale.from_tag("en")))
print(Locale.negotiate(["fr-CA", "de-AT"]))
# Output:
# en_GB
# Locale.En(EnRegion.Us)
# de

# Example 5: Errors
print("\n" + "=" * 50)
print("Example 5: Errors")
print("=" * 50)

try:
    load_source(
        """
        enum Locale { De, En }
        unit greeting {
            _ => "Hello",
            De => "Hallo",
        }
        """,
        name="broken.lexi",
    )
except DictCheckError as e:
    print(e)
# Output:
# error[UNREACHABLE_PATTERN]: Unreachable pattern 'De' in unit 'greeting'
#   --> broken.lexi:5:13
#   = unit: greeting
#   = help: Remove the arm or move it before the pattern that covers it

print("\n" + "=" * 50)
print("[SUCCESS] All examples completed successfully!")
print("=" * 50)
