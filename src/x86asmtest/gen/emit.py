"""writes fixtures as Go assembler test files, one per CPUID group"""

import os

from x86asmtest.gen.generator import param_names


HEADER = """\
// Code generated by x86asmtest. DO NOT EDIT.

#include "../../../../../../runtime/textflag.h"

TEXT asmtest_{name}(SB), NOSPLIT, $0
"""

FOOTER = """\
\tRET
"""

# column the "// hex" comment starts at
COMMENT_COLUMN = 50


def group_name(cpuid):
    name = cpuid.lower()
    for c in "+-.":
        name = name.replace(c, "_")
    return name


def group_fixtures(fixtures):
    """{group name: [fixtures]} in generation order within each group"""
    groups = {}
    for fixture in fixtures:
        groups.setdefault(group_name(fixture.cpuid), []).append(fixture)
    return groups


def fixture_line(fixture):
    return f"\t{fixture.asm:<{COMMENT_COLUMN}} // {fixture.hex}\n"


def render_group(name, fixtures):
    lines = [HEADER.format(name=name)]
    lines.extend(map(fixture_line, fixtures))
    lines.append(FOOTER)
    return "".join(lines)


def write_fixtures(outdir, fixtures):
    os.makedirs(outdir, exist_ok=True)
    paths = []
    for (name, group) in sorted(group_fixtures(fixtures).items()):
        path = os.path.join(outdir, f"{name}.s")
        with open(path, "w") as f:
            f.write(render_group(name, group))
        paths.append(path)
    return paths


def render_report(generator):
    lines = [f"# skipped forms: {len(generator.skipped)}\n"]
    for skip in generator.skipped:
        lines.append(f"{skip.form}: {skip.reason}\n")
    lines.append(f"# failed combinations: {len(generator.failures)}\n")
    for failure in generator.failures:
        lines.append(f"{failure.form} [{param_names(failure.params)}] "
                     f"{failure.asm}: {failure.error}\n")
    return "".join(lines)


def write_report(path, generator):
    with open(path, "w") as f:
        f.write(render_report(generator))
