"""Fixed .gitignore templates, selected by language."""

from projectpilot.schemas.specification import Language

SWIFT = """\
# Swift
.build/
DerivedData/
*.xcodeproj/
*.xcworkspace/
xcuserdata/
.swiftpm/

# SPM
Packages/
Package.resolved

# Build artifacts
*.app
*.dSYM.zip
*.dSYM
"""

RUST = """\
# Rust
target/
Cargo.lock
**/*.rs.bk
*.pdb

# IDE
.idea/
.vscode/
"""

PYTHON = """\
# Python
__pycache__/
*.py[cod]
*$py.class
*.so
build/
dist/
*.egg-info/
.eggs/

# Virtual environments
venv/
env/
.venv/

# Testing
.pytest_cache/
.coverage
htmlcov/
"""

NODE = """\
# Node
node_modules/
npm-debug.log*
yarn-debug.log*
yarn-error.log*
.npm

# Build
dist/
build/

# Environment
.env
.env.local
"""

GITIGNORE_BY_LANGUAGE: dict[Language, str] = {
    Language.SWIFT: SWIFT,
    Language.RUST: RUST,
    Language.PYTHON: PYTHON,
    Language.TYPESCRIPT: NODE,
    Language.JAVASCRIPT: NODE,
}


def gitignore_for(language: Language, tauri: bool = False) -> str:
    """Return the .gitignore body for ``language``.

    Tauri projects carry a Node front end next to the Rust crate, so they get
    both sections.
    """
    content = GITIGNORE_BY_LANGUAGE[language]
    if tauri and language == Language.RUST:
        content = content + "\n" + NODE
    return content
