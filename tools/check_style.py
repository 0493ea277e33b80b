#!/usr/bin/env python3
"""Check for banned Python constructions in hashbang source.

Banned constructions:

    Construction          Reason                            Use instead
    --------------------  --------------------------------  --------------------------
    os.system(...)        Commands are argument vectors,    subprocess.run(argv)
    os.popen(...)         never shell strings
    shell=True            Same                              pass argv, shell=False
"""

import ast
import os
import sys

BANNED_CALLS = frozenset({("os", "system"), ("os", "popen")})


def find_python_files(directory):
    """Find all .py files recursively."""
    result = []
    for root, dirs, files in os.walk(directory):
        if "__pycache__" in dirs:
            dirs.remove("__pycache__")
        for f in files:
            if f.endswith(".py"):
                result.append(os.path.join(root, f))
    result.sort()
    return result


def check_source(source, filename="<string>"):
    tree = ast.parse(source, filename)
    errors = []

    for node in ast.walk(tree):
        if not isinstance(node, ast.Call):
            continue
        lineno = node.lineno

        # os.system(...), os.popen(...)
        func = node.func
        if (
            isinstance(func, ast.Attribute)
            and isinstance(func.value, ast.Name)
            and (func.value.id, func.attr) in BANNED_CALLS
        ):
            errors.append((lineno, f"{func.value.id}.{func.attr}: banned, use subprocess.run(argv)"))

        # subprocess.*(..., shell=True)
        for keyword in node.keywords:
            if (
                keyword.arg == "shell"
                and isinstance(keyword.value, ast.Constant)
                and keyword.value.value is True
            ):
                errors.append((lineno, "shell=True: banned, pass an argument vector"))

    return errors


def check_file(filepath):
    with open(filepath) as f:
        source = f.read()
    return check_source(source, filepath)


def main():
    src_dir = "src"
    if len(sys.argv) > 1:
        src_dir = sys.argv[1]

    if not os.path.isdir(src_dir):
        print(f"Directory not found: {src_dir}")
        sys.exit(1)

    files = find_python_files(src_dir)
    if not files:
        print(f"No Python files found in: {src_dir}")
        sys.exit(1)

    all_errors = []
    for filepath in files:
        try:
            errors = check_file(filepath)
            for lineno, description in errors:
                all_errors.append((filepath, lineno, description))
        except SyntaxError as e:
            print(f"Syntax error in {filepath}: {e}")
            sys.exit(1)

    if not all_errors:
        sys.exit(0)

    print(f"Found {len(all_errors)} banned construction(s):")
    for filepath, lineno, description in sorted(all_errors):
        print(f"  {filepath}:{lineno}: {description}")
    sys.exit(1)


if __name__ == "__main__":
    main()
