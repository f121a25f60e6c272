"""Source templates for each supported stack.

Templates use :class:`string.Template` placeholders (``$name``); a literal
dollar sign in generated code is written as ``$$``.

The Node (TypeScript/JavaScript) set is not chosen by the stack decision
rules today. It is selected whenever a caller hands :func:`render_sources` a
stack with one of those languages, which is how new rules would reach it.
"""

from dataclasses import dataclass
from string import Template

from projectpilot.schemas.architecture import ProjectArchitecture, TestingStrategy
from projectpilot.schemas.specification import Language
from projectpilot.schemas.stack import BuildSystemKind, ProjectKind, TechStack


class UnsupportedStackError(ValueError):
    """No template set exists for the requested kind/language pair."""


@dataclass(frozen=True)
class TemplateContext:
    """Values substituted into every template."""

    name: str
    package: str
    crate: str
    description: str
    version: str
    license_id: str

    def as_mapping(self) -> dict[str, str]:
        return {
            "name": self.name,
            "package": self.package,
            "crate": self.crate,
            "description": self.description,
            "version": self.version,
            "license_id": self.license_id,
            "identifier": f"com.{self.name.lower()}",
        }


def _render(files: dict[str, Template], ctx: TemplateContext, **extra: str) -> dict[str, str]:
    mapping = ctx.as_mapping()
    mapping.update(extra)
    return {
        Template(path).substitute(mapping): body.substitute(mapping)
        for path, body in files.items()
    }


# ---------------------------------------------------------------------------
# Swift / SwiftUI (macOS)
# ---------------------------------------------------------------------------

SWIFT_PACKAGE = Template("""\
// swift-tools-version: 5.10
import PackageDescription

let package = Package(
    name: "$name",
    platforms: [
        .macOS(.v14)
    ],
    products: [
        .executable(
            name: "$name",
            targets: ["$name"]
        )
    ],
    dependencies: [],
    targets: [
        .executableTarget(
            name: "$name",
            dependencies: []
        )$test_target
    ]
)
""")

SWIFT_TEST_TARGET = """,
        .testTarget(
            name: "${name}Tests",
            dependencies: ["$name"]
        )"""

SWIFT_APP = Template("""\
//
//  ${name}App.swift
//  $name
//

import SwiftUI

@main
struct ${name}App: App {
    var body: some Scene {
        WindowGroup {
            ContentView()
                .frame(minWidth: 800, minHeight: 600)
        }
        .windowStyle(.hiddenTitleBar)
        .windowToolbarStyle(.unified)

        Settings {
            SettingsView()
        }
    }
}
""")

SWIFT_CONTENT_VIEW = Template("""\
//
//  ContentView.swift
//  $name
//

import SwiftUI

struct ContentView: View {
    @State private var text = ""

    var body: some View {
        NavigationSplitView {
            List {
                Label("Home", systemImage: "house")
                Label("Settings", systemImage: "gearshape")
            }
        } detail: {
            VStack(spacing: 20) {
                Text("Welcome to $name")
                    .font(.largeTitle)
                    .fontWeight(.bold)

                TextField("Enter text...", text: $$text)
                    .textFieldStyle(.roundedBorder)
                    .frame(maxWidth: 400)

                Button("Submit") {
                    print("Submitted: \\(text)")
                }
                .buttonStyle(.borderedProminent)
            }
            .padding()
            .frame(maxWidth: .infinity, maxHeight: .infinity)
        }
    }
}

#Preview {
    ContentView()
}
""")

SWIFT_SETTINGS_VIEW = Template("""\
//
//  SettingsView.swift
//  $name
//

import SwiftUI

struct SettingsView: View {
    @AppStorage("theme") private var theme = "system"

    var body: some View {
        Form {
            Section("General") {
                Picker("Theme", selection: $$theme) {
                    Text("System").tag("system")
                    Text("Light").tag("light")
                    Text("Dark").tag("dark")
                }
            }

            Section("About") {
                LabeledContent("Version", value: "$version")
            }
        }
        .formStyle(.grouped)
        .frame(width: 500, height: 400)
    }
}
""")

SWIFT_EXAMPLE_MODEL = Template("""\
//
//  ExampleModel.swift
//  $name
//

import Foundation

struct ExampleModel: Identifiable, Codable {
    let id: UUID
    var name: String
    var createdAt: Date

    init(id: UUID = UUID(), name: String, createdAt: Date = Date()) {
        self.id = id
        self.name = name
        self.createdAt = createdAt
    }
}
""")

SWIFT_TESTS = Template("""\
//
//  ${name}Tests.swift
//

import XCTest
@testable import $name

final class ${name}Tests: XCTestCase {

    func testExampleModelKeepsName() throws {
        let model = ExampleModel(name: "Example")
        XCTAssertEqual(model.name, "Example")
    }
}
""")


def swift_files(ctx: TemplateContext, with_tests: bool) -> dict[str, str]:
    files = {
        "Package.swift": SWIFT_PACKAGE,
        "Sources/$name/${name}App.swift": SWIFT_APP,
        "Sources/$name/ContentView.swift": SWIFT_CONTENT_VIEW,
        "Sources/$name/SettingsView.swift": SWIFT_SETTINGS_VIEW,
        "Sources/$name/Models/ExampleModel.swift": SWIFT_EXAMPLE_MODEL,
    }
    test_target = ""
    if with_tests:
        files["Tests/${name}Tests/${name}Tests.swift"] = SWIFT_TESTS
        test_target = Template(SWIFT_TEST_TARGET).substitute(name=ctx.name)
    return _render(files, ctx, test_target=test_target)


# ---------------------------------------------------------------------------
# Rust / Tauri (cross-platform GUI)
# ---------------------------------------------------------------------------

TAURI_PACKAGE_JSON = Template("""\
{
  "name": "$crate",
  "private": true,
  "version": "$version",
  "scripts": {
    "dev": "tauri dev",
    "build": "tauri build",
    "tauri": "tauri"
  },
  "devDependencies": {
    "@tauri-apps/cli": "^1.5"
  }
}
""")

TAURI_INDEX_HTML = Template("""\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>$name</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            display: flex;
            justify-content: center;
            align-items: center;
            min-height: 100vh;
            margin: 0;
        }
        .container { text-align: center; padding: 2rem; }
    </style>
</head>
<body>
    <div class="container">
        <h1>Welcome to $name</h1>
        <p>Built with Tauri</p>
        <input id="name-input" type="text" placeholder="Enter your name">
        <button onclick="greet()">Greet</button>
        <div id="greeting"></div>
    </div>

    <script>
        const { invoke } = window.__TAURI__.tauri;

        async function greet() {
            const name = document.getElementById('name-input').value;
            const greeting = await invoke('greet', { name });
            document.getElementById('greeting').textContent = greeting;
        }
    </script>
</body>
</html>
""")

TAURI_CARGO_TOML = Template("""\
[package]
name = "$crate"
version = "$version"
description = "$description"
license = "$license_id"
edition = "2021"

[build-dependencies]
tauri-build = { version = "1.5" }

[dependencies]
serde = { version = "1.0", features = ["derive"] }
serde_json = "1.0"
tauri = { version = "1.5", features = ["shell-open"] }

[features]
default = ["custom-protocol"]
custom-protocol = ["tauri/custom-protocol"]
""")

TAURI_BUILD_RS = Template("""\
fn main() {
    tauri_build::build()
}
""")

TAURI_CONF_JSON = Template("""\
{
  "$$schema": "https://schema.tauri.app/config/1",
  "build": {
    "devPath": "../",
    "distDir": "../"
  },
  "package": {
    "productName": "$name",
    "version": "$version"
  },
  "tauri": {
    "allowlist": {
      "all": false,
      "fs": {
        "all": true,
        "scope": ["$$APPDATA/*"]
      }
    },
    "bundle": {
      "active": true,
      "identifier": "$identifier",
      "targets": "all"
    },
    "security": {
      "csp": null
    },
    "windows": [
      {
        "title": "$name",
        "width": 1200,
        "height": 800,
        "resizable": true,
        "fullscreen": false
      }
    ]
  }
}
""")

TAURI_MAIN_RS = Template("""\
// Prevents an additional console window on Windows in release builds
#![cfg_attr(not(debug_assertions), windows_subsystem = "windows")]

fn main() {
    tauri::Builder::default()
        .invoke_handler(tauri::generate_handler![greet])
        .run(tauri::generate_context!())
        .expect("error while running tauri application");
}

#[tauri::command]
fn greet(name: &str) -> String {
    format!("Hello, {}! Welcome to $name!", name)
}
""")

RUST_SMOKE_TEST = Template("""\
#[test]
fn crate_builds() {
    assert_eq!(env!("CARGO_PKG_NAME"), "$crate");
}
""")


def tauri_files(ctx: TemplateContext, with_tests: bool) -> dict[str, str]:
    files = {
        "package.json": TAURI_PACKAGE_JSON,
        "index.html": TAURI_INDEX_HTML,
        "src-tauri/Cargo.toml": TAURI_CARGO_TOML,
        "src-tauri/build.rs": TAURI_BUILD_RS,
        "src-tauri/tauri.conf.json": TAURI_CONF_JSON,
        "src-tauri/src/main.rs": TAURI_MAIN_RS,
    }
    if with_tests:
        files["src-tauri/tests/smoke.rs"] = RUST_SMOKE_TEST
    return _render(files, ctx)


# ---------------------------------------------------------------------------
# Rust / clap (command-line tool)
# ---------------------------------------------------------------------------

RUST_CLI_CARGO_TOML = Template("""\
[package]
name = "$crate"
version = "$version"
description = "$description"
license = "$license_id"
edition = "2021"

[dependencies]
clap = { version = "4", features = ["derive"] }
""")

RUST_CLI_MAIN_RS = Template("""\
use clap::Parser;

/// $description
#[derive(Parser, Debug)]
#[command(name = "$crate", version, about)]
struct Cli {
    /// Name to greet
    #[arg(short, long, default_value = "world")]
    name: String,

    /// Print extra output
    #[arg(short, long)]
    verbose: bool,
}

fn main() {
    let cli = Cli::parse();
    if cli.verbose {
        eprintln!("$name starting");
    }
    println!("Hello, {}!", cli.name);
}
""")


def rust_cli_files(ctx: TemplateContext, with_tests: bool) -> dict[str, str]:
    files = {
        "Cargo.toml": RUST_CLI_CARGO_TOML,
        "src/main.rs": RUST_CLI_MAIN_RS,
    }
    if with_tests:
        files["tests/smoke.rs"] = RUST_SMOKE_TEST
    return _render(files, ctx)


# ---------------------------------------------------------------------------
# Python / click
# ---------------------------------------------------------------------------

PYTHON_PYPROJECT = Template("""\
[build-system]
requires = ["setuptools>=68", "wheel"]
build-backend = "setuptools.build_meta"

[project]
name = "$crate"
version = "$version"
description = "$description"
readme = "README.md"
license = { text = "$license_id" }
requires-python = ">=3.10"
dependencies = [
    "click>=8.1",
]

[project.optional-dependencies]
test = ["pytest>=7.4"]

[project.scripts]
$crate = "$package.main:main"

[tool.setuptools.packages.find]
where = ["src"]
""")

PYTHON_INIT = Template('''\
"""$description"""

__version__ = "$version"
''')

PYTHON_MAIN = Template('''\
"""Command-line entry point for $name."""

import click


@click.command()
@click.option("--name", default="world", help="Name to greet")
@click.option("--verbose", "-v", is_flag=True, help="Print extra output")
def main(name: str, verbose: bool) -> None:
    """$description"""
    if verbose:
        click.echo("$name starting", err=True)
    click.echo(f"Hello, {name}!")


if __name__ == "__main__":
    main()
''')

PYTHON_TEST = Template('''\
from click.testing import CliRunner

from $package.main import main


def test_greets_by_name():
    result = CliRunner().invoke(main, ["--name", "$name"])
    assert result.exit_code == 0
    assert "Hello, $name!" in result.output
''')


def python_files(ctx: TemplateContext, with_tests: bool) -> dict[str, str]:
    files = {
        "pyproject.toml": PYTHON_PYPROJECT,
        "src/$package/__init__.py": PYTHON_INIT,
        "src/$package/main.py": PYTHON_MAIN,
    }
    if with_tests:
        files["tests/test_main.py"] = PYTHON_TEST
    return _render(files, ctx)


# ---------------------------------------------------------------------------
# TypeScript / JavaScript (Node)
# ---------------------------------------------------------------------------

NODE_PACKAGE_JSON = Template("""\
{
  "name": "$crate",
  "version": "$version",
  "description": "$description",
  "license": "$license_id",
  "type": "module",
  "main": "$entry",
  "scripts": {
    $scripts
  }$dev_dependencies
}
""")

TS_CONFIG = Template("""\
{
  "compilerOptions": {
    "target": "ES2022",
    "module": "NodeNext",
    "moduleResolution": "NodeNext",
    "outDir": "dist",
    "rootDir": ".",
    "strict": true
  },
  "include": ["src", "test"]
}
""")

TS_INDEX = Template("""\
export function greet(name: string): string {
  return `Hello, $${name}!`;
}

console.log(greet("$name"));
""")

JS_INDEX = Template("""\
export function greet(name) {
  return `Hello, $${name}!`;
}

console.log(greet("$name"));
""")

NODE_TEST = Template("""\
import { test } from "node:test";
import assert from "node:assert/strict";
import { greet } from "../src/index$import_ext";

test("greet includes the name", () => {
  assert.equal(greet("$name"), "Hello, $name!");
});
""")


def node_files(ctx: TemplateContext, typescript: bool, with_tests: bool) -> dict[str, str]:
    if typescript:
        ext, entry, import_ext = "ts", "dist/src/index.js", ".js"
        scripts = '"build": "tsc",\n    "start": "node dist/src/index.js",\n    "test": "tsc && node --test dist/test/"'
        dev_dependencies = ',\n  "devDependencies": {\n    "typescript": "^5.4",\n    "@types/node": "^20"\n  }'
    else:
        ext, entry, import_ext = "js", "src/index.js", ".js"
        scripts = '"start": "node src/index.js",\n    "test": "node --test test/"'
        dev_dependencies = ""

    files = {
        "package.json": NODE_PACKAGE_JSON,
        f"src/index.{ext}": TS_INDEX if typescript else JS_INDEX,
    }
    if typescript:
        files["tsconfig.json"] = TS_CONFIG
    if with_tests:
        files[f"test/index.test.{ext}"] = NODE_TEST
    return _render(
        files,
        ctx,
        entry=entry,
        scripts=scripts,
        dev_dependencies=dev_dependencies,
        import_ext=import_ext,
    )


# ---------------------------------------------------------------------------
# Selection and README
# ---------------------------------------------------------------------------


def render_sources(stack: TechStack, architecture: ProjectArchitecture, ctx: TemplateContext) -> dict[str, str]:
    """
    Render the manifest, source and test stubs for ``stack``.

    Returns:
        Mapping of relative path to file content

    Raises:
        UnsupportedStackError: No template set matches the stack
    """
    with_tests = architecture.testing_strategy == TestingStrategy.UNIT

    if stack.kind == ProjectKind.MACOS_NATIVE and stack.language == Language.SWIFT:
        return swift_files(ctx, with_tests)
    if stack.kind == ProjectKind.CROSS_PLATFORM_GUI and stack.language == Language.RUST:
        return tauri_files(ctx, with_tests)
    if stack.language == Language.RUST:
        return rust_cli_files(ctx, with_tests)
    if stack.language == Language.PYTHON:
        return python_files(ctx, with_tests)
    if stack.language in (Language.TYPESCRIPT, Language.JAVASCRIPT):
        return node_files(ctx, stack.language == Language.TYPESCRIPT, with_tests)

    raise UnsupportedStackError(
        f"No templates for {stack.kind.value} projects in {stack.language.value}"
    )


BUILD_COMMANDS: dict[BuildSystemKind, tuple[str, str, str]] = {
    BuildSystemKind.SWIFT_PM: ("swift build", "swift run", "swift test"),
    BuildSystemKind.CARGO: ("cargo build", "cargo run", "cargo test"),
    BuildSystemKind.NPM: ("npm install", "npm start", "npm test"),
    BuildSystemKind.PIP: ('pip install -e ".[test]"', "$crate --help", "pytest"),
}

TAURI_COMMANDS = ("npm install", "npm run dev", "cd src-tauri && cargo test")

README = Template("""\
# $name

$description

## Stack

- Type: $kind
- Language: $language
- Framework: $framework
- Build system: $build_system

## Architecture

Pattern: **$pattern** (testing: $testing)

$modules

## Getting started

```sh
$build
$run
```

## Tests

$tests_section

## License

$license_id. See [LICENSE](LICENSE).
""")


def render_readme(stack: TechStack, architecture: ProjectArchitecture, ctx: TemplateContext) -> str:
    if stack.kind == ProjectKind.CROSS_PLATFORM_GUI and stack.framework == "Tauri":
        build, run, test = TAURI_COMMANDS
    else:
        build, run, test = (
            Template(command).substitute(ctx.as_mapping())
            for command in BUILD_COMMANDS[stack.build_system]
        )

    if architecture.testing_strategy == TestingStrategy.UNIT:
        tests_section = f"```sh\n{test}\n```"
    else:
        tests_section = "No test suite was generated for this project."

    modules = "\n".join(f"- **{m.name}**: {m.purpose}" for m in architecture.modules)
    return README.substitute(
        ctx.as_mapping(),
        kind=stack.kind.value,
        language=stack.language.value,
        framework=stack.framework,
        build_system=stack.build_system.value,
        pattern=architecture.pattern.value,
        testing=architecture.testing_strategy.value,
        modules=modules or "- Single module",
        build=build,
        run=run,
        tests_section=tests_section,
    )
