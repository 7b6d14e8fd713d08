"""Framework classification of listening processes."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rule:
    """A command-line signature for a known dev tool.

    Matches when the command contains every ``all_of`` substring, at least
    one ``any_of`` substring (if given) and, if ``name`` is set, the
    process name equals it.
    """

    label: str
    all_of: tuple[str, ...] = ()
    any_of: tuple[str, ...] = ()
    name: str | None = None

    def matches(self, cmd: str, name: str) -> bool:
        if self.name is not None and name != self.name:
            return False
        if not all(s in cmd for s in self.all_of):
            return False
        if self.any_of and not any(s in cmd for s in self.any_of):
            return False
        return True


@dataclass(frozen=True)
class RuntimeRule:
    """A generic interpreter/runtime match, used only on well-known dev ports."""

    label: str
    names: tuple[str, ...] = ()  # exact process names
    name_contains: str | None = None
    prefixes: tuple[str, ...] = ()  # command starts with
    contains: tuple[str, ...] = ()  # command contains

    def matches(self, cmd: str, name: str) -> bool:
        if name in self.names:
            return True
        if self.name_contains and self.name_contains in name:
            return True
        if any(cmd.startswith(p) for p in self.prefixes):
            return True
        return any(s in cmd for s in self.contains)


# Order matters: the first matching rule wins.
TOOL_RULES: tuple[Rule, ...] = (
    # JavaScript / TypeScript
    Rule("Next.js", all_of=("next",), any_of=("dev", "start")),
    Rule("Next.js", any_of=("next-server", "next-router-worker")),
    Rule("Vite", all_of=("vite",)),
    Rule("Webpack", all_of=("webpack", "serve")),
    Rule("Webpack", all_of=("webpack-dev-server",)),
    Rule("React Scripts", all_of=("react-scripts", "start")),
    Rule("Angular", any_of=("ng serve", "@angular")),
    Rule("Nuxt", all_of=("nuxt",)),
    Rule("SvelteKit", all_of=("svelte-kit",)),
    Rule("SvelteKit", all_of=("svelte", "dev")),
    Rule("Remix", all_of=("remix", "dev")),
    Rule("Astro", all_of=("astro", "dev")),
    Rule("Parcel", all_of=("parcel",)),
    Rule("Turbopack", all_of=("turbopack",)),
    Rule("esbuild", all_of=("esbuild", "serve")),
    # Python: app servers before the frameworks they host
    Rule("Gunicorn", all_of=("gunicorn",)),
    Rule("Flask", all_of=("flask",)),
    Rule("Django", all_of=("manage.py", "runserver")),
    Rule("Django", all_of=("django",)),
    Rule("Uvicorn", all_of=("uvicorn",)),
    Rule("FastAPI", all_of=("fastapi",)),
    Rule("Python HTTP", all_of=("http.server",)),
    # Ruby
    Rule("Rails", all_of=("rails", "server")),
    Rule("Rails", all_of=("bin/rails",)),
    Rule("Puma", all_of=("puma",)),
    # Static site generators
    Rule("Hugo", all_of=("hugo", "server")),
    Rule("Jekyll", all_of=("jekyll", "serve")),
    Rule("Gatsby", all_of=("gatsby", "develop")),
    Rule("Eleventy", all_of=("eleventy", "--serve")),
    # PHP, Go, Rust
    Rule("PHP Server", all_of=("php", "-s")),
    Rule("Air (Go)", all_of=("air",), name="air"),
    Rule("Cargo Watch", all_of=("cargo", "watch")),
    # Generic JS servers and runners
    Rule("live-server", all_of=("live-server",)),
    Rule("http-server", all_of=("http-server",)),
    Rule("Bun Dev", all_of=("bun", "dev")),
    Rule("Deno", all_of=("deno",), any_of=("serve", "dev")),
    Rule("NestJS", all_of=("nest", "start")),
    Rule("Nodemon", all_of=("nodemon",)),
    Rule("TS Node", any_of=("ts-node", "tsx")),
)

# Default ports of common dev servers. Anything else needs a tool rule match.
DEV_PORTS: frozenset[int] = frozenset(
    {
        3000, 3001, 3002, 3003, 3004, 3005,
        4000, 4200, 4321,
        5000, 5001, 5173, 5174, 5500,
        6006,
        8000, 8001, 8080, 8081, 8443, 8888,
        9000, 9090,
        24678,
    }
)

RUNTIME_RULES: tuple[RuntimeRule, ...] = (
    RuntimeRule("Node", names=("node",), prefixes=("node ",), contains=("/node ",)),
    RuntimeRule("Python", name_contains="python", contains=("python",)),
    RuntimeRule("Ruby", names=("ruby",), contains=("ruby",)),
    RuntimeRule("Go", names=("go",), prefixes=("go ",)),
    RuntimeRule("Bun", names=("bun",), prefixes=("bun ",)),
    RuntimeRule("Deno", names=("deno",), prefixes=("deno ",)),
    RuntimeRule("Java", names=("java",), contains=("java",)),
    RuntimeRule("PHP", names=("php",), contains=("php",)),
)


def classify(command: str, process_name: str, port: int) -> str | None:
    """Label a listening process with the dev tool it most likely runs.

    Tool signatures are checked first regardless of port. Only when none
    match, and the port is a well-known dev port, is the process labelled
    by its runtime (Node, Python, ...).

    Args:
        command: Full command line (or the process name if unknown)
        process_name: Short process name from lsof
        port: Listening port

    Returns:
        Label, or None if the process is not considered a dev server
    """
    cmd = command.lower()
    name = process_name.lower()
    return classify_tool(cmd, name) or classify_runtime(cmd, name, port)


def classify_tool(cmd: str, name: str) -> str | None:
    """Match lowercased command and name against the tool rules in order."""
    for rule in TOOL_RULES:
        if rule.matches(cmd, name):
            return rule.label
    return None


def classify_runtime(cmd: str, name: str, port: int) -> str | None:
    """Label by runtime, but only on a well-known dev port."""
    if port not in DEV_PORTS:
        return None
    for rule in RUNTIME_RULES:
        if rule.matches(cmd, name):
            return rule.label
    return None
