"""Command-line interface for chordshift.

Provides commands for:
- transpose: Transpose a chord chart by semitones or to a key
- preview: Show what each chord becomes
- interval: Semitones between two keys
- capo: Capo position for a shift, or capo suggestions for a chart
- analyze: Key, Roman numerals and named progressions
- check: Doubtful chords with suggested fixes
- reharmonize: Alternative progressions
"""

from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core import (
    ChordShiftError,
    Diagnostic,
    DEFAULT_PREVIEW_LIMIT,
    Key,
    prefers_sharps,
    semitones_between,
)
from .core.constants import DEFAULT_MAX_CAPO_FRET
from .inference import (
    AnalyzerConfig,
    ChordChecker,
    ProgressionAnalyzer,
    ReharmonizationStyle,
    Reharmonizer,
    ReharmonizerConfig,
    infer_key,
)
from .parsing import split_chord_list, tokenize
from .transpose import (
    CapoConfig,
    CapoCalculator,
    TransposeEngine,
    calculate_capo,
    capo_content,
)

app = typer.Typer(
    name="chordshift",
    help="Chord chart transposition and progression analysis",
    rich_markup_mode="markdown",
)
console = Console()


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error: {escape(message)}[/red]")
    raise typer.Exit(1)


def _read_source(text: Optional[str], input_file: Optional[Path]) -> str:
    """Chord chart text from an argument or a file."""
    if input_file is not None:
        if not input_file.exists():
            _fail(f"File not found: {input_file}")
        return input_file.read_text(encoding="utf-8")
    if text is None:
        _fail("Provide chord text or --file")
    return text


def _read_chords(chords: Optional[List[str]], input_file: Optional[Path]) -> List[str]:
    """Chord list from arguments ("C G Am F" or C G Am F) or a chart file."""
    if input_file is not None:
        return tokenize(_read_source(None, input_file)).symbols
    if not chords:
        _fail("Provide chords or --file")
    return split_chord_list(" ".join(chords))


def _show_diagnostics(diagnostics: List[Diagnostic]) -> None:
    for diag in diagnostics:
        console.print(f"[yellow]Warning: {escape(diag.message or diag.text)}[/yellow]")


@app.command()
def transpose(
    text: Optional[str] = typer.Argument(None, help="Chord chart text, e.g. \"[C]Amazing [F]grace\""),
    input_file: Optional[Path] = typer.Option(None, "-f", "--file", help="Read the chart from a file"),
    semitones: int = typer.Option(0, "-s", "--semitones", help="Signed shift in semitones"),
    to_key: Optional[str] = typer.Option(None, "--to", help="Target key (overrides --semitones)"),
    from_key: Optional[str] = typer.Option(None, "--from", help="Current key (inferred if omitted)"),
    sharps: Optional[bool] = typer.Option(
        None, "--sharps/--flats", help="Spelling policy (default: sharps, or the target key's signature)"
    ),
    capo: int = typer.Option(0, "--capo", help="Write the shapes to play with a capo on this fret"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write the result to a file"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON (for scripting)"),
):
    """Transpose a chord chart. Lyrics and directives are kept as they are.

    **Examples:**

        chordshift transpose "[G]Amazing [C]grace" -s 2

        chordshift transpose -f song.cho --to Eb -o song_eb.cho
    """
    content = _read_source(text, input_file)

    try:
        if to_key is not None:
            if from_key is None:
                estimate = infer_key(tokenize(content).symbols)
                if estimate.key is None:
                    _fail("Could not infer the current key; pass --from")
                from_key = estimate.key.short_name
            semitones = semitones_between(from_key, to_key)
            if sharps is None:
                sharps = prefers_sharps(to_key)
        engine = TransposeEngine(prefer_sharps=True if sharps is None else sharps)
        result = engine.transpose_content(content, semitones)
    except ChordShiftError as e:
        _fail(str(e))

    if capo:
        result = capo_content(result, capo, engine.config.prefer_sharps)

    if json_output:
        console.print_json(data={
            "semitones": semitones,
            "suggested_capo": calculate_capo(semitones),
            "capo": capo,
            "content": result,
        })
        return

    _show_diagnostics(tokenize(content).diagnostics)
    if output is not None:
        output.write_text(result, encoding="utf-8")
        console.print(f"[green]Wrote {output}[/green]")
    else:
        console.print(result, markup=False, highlight=False, soft_wrap=True)


@app.command()
def preview(
    text: Optional[str] = typer.Argument(None, help="Chord chart text"),
    input_file: Optional[Path] = typer.Option(None, "-f", "--file", help="Read the chart from a file"),
    semitones: int = typer.Option(0, "-s", "--semitones", help="Signed shift in semitones"),
    sharps: bool = typer.Option(True, "--sharps/--flats", help="Spelling policy"),
    limit: int = typer.Option(DEFAULT_PREVIEW_LIMIT, "--limit", help="Pairs to show"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON (for scripting)"),
):
    """Show each distinct chord and what it becomes."""
    content = _read_source(text, input_file)
    engine = TransposeEngine(prefer_sharps=sharps, preview_limit=limit)
    result = engine.preview(content, semitones)

    if json_output:
        console.print_json(data={
            "semitones": semitones,
            "pairs": [list(pair) for pair in result.pairs],
        })
        return

    _show_diagnostics(result.diagnostics)
    table = Table(title=f"Transpose {semitones:+d}")
    table.add_column("Original", style="cyan")
    table.add_column("Transposed", style="green")
    for original, transposed in result.visible:
        table.add_row(escape(original), escape(transposed))
    console.print(table)
    if result.remaining:
        console.print(f"   [dim]+{result.remaining} more[/dim]")


@app.command()
def interval(
    from_key: str = typer.Argument(..., help="Current key, e.g. C or Am"),
    to_key: str = typer.Argument(..., help="Target key"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON (for scripting)"),
):
    """Semitones from one key up to another (0-11)."""
    try:
        up = semitones_between(from_key, to_key)
    except ChordShiftError as e:
        _fail(str(e))

    down = up - 12 if up else 0
    if json_output:
        console.print_json(data={
            "from": from_key,
            "to": to_key,
            "semitones": up,
            "down": down,
            "capo": calculate_capo(up),
        })
        return

    console.print(f"{escape(from_key)} -> {escape(to_key)}: [green]{up:+d}[/green] semitones "
                  f"(or {down:+d} down)")
    if up:
        console.print(f"   Capo {calculate_capo(up)} with the original shapes")


@app.command()
def capo(
    text: Optional[str] = typer.Argument(None, help="Chord chart text to find easier shapes for"),
    input_file: Optional[Path] = typer.Option(None, "-f", "--file", help="Read the chart from a file"),
    semitones: Optional[int] = typer.Option(None, "-s", "--semitones", help="Capo for this shift"),
    key: Optional[str] = typer.Option(None, "-k", "--key", help="Song key, explains the capo setup"),
    max_fret: int = typer.Option(DEFAULT_MAX_CAPO_FRET, "--max-fret", help="Highest fret to suggest"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON (for scripting)"),
):
    """Capo position for a shift, or capo suggestions for a chord chart.

    **Examples:**

        chordshift capo -s 2 -k G

        chordshift capo "[F]Some [Bb]song [C]here"
    """
    calculator = CapoCalculator(CapoConfig(max_fret=max_fret))

    if semitones is not None:
        fret = calculate_capo(semitones)
        explanation = calculator.explain(key, semitones, fret) if key else None
        if json_output:
            data = {"semitones": semitones, "capo": fret}
            if explanation:
                data["sounding_key"] = explanation.sounding_key
                data["explanation"] = explanation.explanation
            console.print_json(data=data)
            return
        if fret:
            console.print(f"[green]Capo {fret}[/green]")
        else:
            console.print("[yellow]No capo (a capo can only raise pitch)[/yellow]")
        if explanation:
            console.print(f"   {escape(explanation.explanation)}")
        return

    content = _read_source(text, input_file)
    suggestions = calculator.suggest(content)

    if json_output:
        console.print_json(data={"suggestions": [
            {
                "fret": s.fret,
                "difficulty": round(s.difficulty, 2),
                "improvement": round(s.improvement, 2),
                "sample_chords": s.sample_chords,
                "reason": s.reason,
            }
            for s in suggestions
        ]})
        return

    if not suggestions:
        console.print("[yellow]No capo makes these chords easier[/yellow]")
        return

    table = Table(title="Capo Suggestions")
    table.add_column("Fret", style="cyan")
    table.add_column("Shapes", style="green")
    table.add_column("Difficulty", style="yellow")
    table.add_column("Reason", style="magenta")
    for s in suggestions:
        table.add_row(
            str(s.fret),
            escape(" ".join(s.sample_chords)),
            f"{s.difficulty_description} ({s.improvement_description})",
            s.reason,
        )
    console.print(table)


@app.command()
def analyze(
    chords: Optional[List[str]] = typer.Argument(None, help="Chords, e.g. C G Am F"),
    input_file: Optional[Path] = typer.Option(None, "-f", "--file", help="Read chords from a chart file"),
    key: Optional[str] = typer.Option(None, "-k", "--key", help="Analyze in this key instead of inferring it"),
    variations: bool = typer.Option(True, "--variations/--no-variations", help="Include reharmonizations"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON (for scripting)"),
):
    """Key, Roman numerals and named progressions for a chord list."""
    symbols = _read_chords(chords, input_file)
    analyzer = ProgressionAnalyzer(AnalyzerConfig(include_variations=variations))

    try:
        analysis = analyzer.analyze(symbols, key)
    except ChordShiftError as e:
        _fail(str(e))

    if json_output:
        console.print_json(data={
            "chords": analysis.chords,
            "key": analysis.key.name if analysis.key else None,
            "scale": analysis.scale,
            "numerals": analysis.numerals,
            "roman_numerals": [
                {
                    "chord": n.chord,
                    "numeral": n.numeral,
                    "function": n.function.value,
                    "is_diatonic": n.is_diatonic,
                }
                for n in analysis.roman_numerals
            ],
            "progression_type": analysis.progression_type.value if analysis.progression_type else None,
            "common_name": analysis.common_name,
            "confidence": analysis.confidence,
            "cadences": [list(c) for c in analysis.cadences],
            "variations": [
                {
                    "chords": v.chords,
                    "type": v.variation_type.value,
                    "difficulty": v.difficulty.value,
                    "description": v.description,
                }
                for v in analysis.variations
            ],
        })
        return

    _show_diagnostics(analysis.diagnostics)
    key_name = analysis.key.name if analysis.key else "unknown"
    console.print(f"\n[bold blue]Key: {key_name}[/bold blue] (confidence: {analysis.confidence:.2f})")

    table = Table(title="Roman Numerals")
    table.add_column("Chord", style="cyan")
    table.add_column("Numeral", style="green")
    table.add_column("Function", style="yellow")
    table.add_column("Diatonic", style="magenta")
    for n in analysis.roman_numerals:
        table.add_row(escape(n.chord), n.numeral, n.function.value, "yes" if n.is_diatonic else "no")
    console.print(table)

    if analysis.common_name:
        console.print(f"   [green]Progression: {analysis.common_name}[/green] "
                      f"({analysis.progression_type.description})")
    if analysis.variations:
        _show_variations(analysis.variations)


@app.command()
def check(
    chords: Optional[List[str]] = typer.Argument(None, help="Chords, e.g. C G Am F"),
    input_file: Optional[Path] = typer.Option(None, "-f", "--file", help="Read chords from a chart file"),
    key: Optional[str] = typer.Option(None, "-k", "--key", help="Check against this key instead of inferring it"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON (for scripting)"),
):
    """Find doubtful chords and suggest fixes."""
    symbols = _read_chords(chords, input_file)

    try:
        errors = ChordChecker().detect_errors(symbols, key)
    except ChordShiftError as e:
        _fail(str(e))

    if json_output:
        console.print_json(data={"errors": [
            {
                "index": e.chord_index,
                "chord": e.chord,
                "type": e.error_type.value,
                "severity": e.severity.value,
                "suggestions": [
                    {"chord": s.chord, "confidence": s.confidence, "reason": s.reason.value}
                    for s in e.suggestions
                ],
                "explanation": e.explanation,
            }
            for e in errors
        ]})
        return

    if not errors:
        console.print("[green]No issues found[/green]")
        return

    table = Table(title="Chord Issues")
    table.add_column("#", style="dim")
    table.add_column("Chord", style="cyan")
    table.add_column("Issue", style="yellow")
    table.add_column("Suggestions", style="green")
    table.add_column("Explanation")
    for e in errors:
        table.add_row(
            str(e.chord_index + 1),
            escape(e.chord),
            f"{e.error_type.value} ({e.severity.value})",
            escape(", ".join(s.chord for s in e.suggestions)),
            escape(e.explanation),
        )
    console.print(table)


@app.command()
def reharmonize(
    chords: Optional[List[str]] = typer.Argument(None, help="Chords, e.g. C G Am F"),
    input_file: Optional[Path] = typer.Option(None, "-f", "--file", help="Read chords from a chart file"),
    style: ReharmonizationStyle = typer.Option(ReharmonizationStyle.BALANCED, "--style", help="Reharmonization style"),
    key: Optional[str] = typer.Option(None, "-k", "--key", help="Reharmonize in this key instead of inferring it"),
    max_variations: int = typer.Option(8, "--max", help="Maximum variations"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON (for scripting)"),
):
    """Alternative progressions, one chord per original chord."""
    symbols = _read_chords(chords, input_file)
    reharmonizer = Reharmonizer(ReharmonizerConfig(max_variations=max_variations))

    try:
        variations = reharmonizer.reharmonize(symbols, style, Key.parse(key) if key else None)
    except ChordShiftError as e:
        _fail(str(e))

    if json_output:
        console.print_json(data={"variations": [
            {
                "chords": v.chords,
                "type": v.variation_type.value,
                "difficulty": v.difficulty.value,
                "description": v.description,
            }
            for v in variations
        ]})
        return

    if not variations:
        console.print("[yellow]No variations for these chords[/yellow]")
        return
    _show_variations(variations)


def _show_variations(variations):
    """Display variations in a table."""
    table = Table(title="Variations")
    table.add_column("Chords", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Difficulty", style="yellow")
    table.add_column("Description", style="magenta")

    for v in variations:
        table.add_row(
            escape(" ".join(v.chords)),
            v.variation_type.value,
            v.difficulty.value,
            v.description,
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
