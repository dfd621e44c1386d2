"""Pydantic report models built from an Analysis"""

from dataclasses import asdict
from typing import Any

from pydantic import BaseModel, Field

from tokenscope.analyze.engine import Analysis
from tokenscope.analyze.statistics import DensityBlock, PercentileStats, TokenDensityMap, render_category_bar


class LineReport(BaseModel):
    """A single line in the top-expensive-lines list"""

    line_number: int = Field(..., examples=[42], description="1-based line number")
    tokens: int = Field(..., examples=[87], description="Tokens starting on this line")
    chars: int = Field(..., examples=[240], description="Characters on this line")
    token_char_ratio: float = Field(..., examples=[0.36], description="Tokens per character")
    content: str = Field(..., description="Line content, truncated for display")


class RecommendationReport(BaseModel):
    """One optimization recommendation"""

    title: str = Field(..., examples=["Consolidate consecutive empty lines"])
    description: str
    affected_lines: list[int] = Field(default_factory=list)
    estimated_save: int = Field(..., examples=[12], description="Estimated tokens saved")
    save_percentage: float = Field(..., examples=[1.5], description="Savings as percent of total tokens")
    priority: int = Field(..., examples=[1], description="1 = high, 3 = low")
    difficulty: str = Field(..., examples=["easy"])
    before_example: str = ""
    after_example: str = ""
    is_quick_win: bool = False


class DensityBlockReport(BaseModel):
    start_line: int
    end_line: int
    tokens: int
    percentage: float
    is_hot: bool


class PercentilesReport(BaseModel):
    min: int = 0
    p25: float = 0.0
    median: float = 0.0
    p75: float = 0.0
    p90: float = 0.0
    p95: float = 0.0
    max: int = 0
    top10_pct: float = Field(0.0, description="Percent of tokens held by the top 10% of lines")


class CategoryReport(BaseModel):
    """Token counts and shares per content category"""

    counts: dict[str, int] = Field(
        default_factory=dict, examples=[{"prose": 120, "code_blocks": 300, "urls": 10, "formatting": 8}]
    )
    percentages: dict[str, float] = Field(default_factory=dict)


class AnalysisReport(BaseModel):
    """Serializable analysis report for CLI and JSON output"""

    path: str = Field(..., examples=["README.md"], description="Analyzed file")
    encoding: str = Field(..., examples=["cl100k_base"], description="Tokenizer encoding used")
    time: float = Field(..., examples=[0.042], description="Analysis time in seconds")
    total_tokens: int
    total_lines: int
    total_chars: int
    avg_tokens_per_line: float
    efficiency_score: int = Field(..., examples=[82], description="0-100, higher is better")
    reliability_score: int = Field(..., examples=[95], description="0-100, 100 means no safety issues")
    total_issues: int
    waste_tokens: int
    potential_savings: int
    issue_counts: dict[str, int] = Field(default_factory=dict, description="Issues per bucket")
    issues: dict[str, list[dict[str, Any]]] = Field(default_factory=dict, description="Issue details per bucket")
    recommendations: list[RecommendationReport] = Field(default_factory=list)
    top_lines: list[LineReport] = Field(default_factory=list)
    percentiles: PercentilesReport = Field(default_factory=PercentilesReport)
    density: list[DensityBlockReport] = Field(default_factory=list)
    categories: CategoryReport = Field(default_factory=CategoryReport)

    @classmethod
    def from_analysis(
        cls, path: str, encoding: str, analysis: Analysis, elapsed: float, top_n: int = 10
    ) -> 'AnalysisReport':
        """Build a report from an Analysis.

        Args:
            path: Path shown in the report.
            encoding: Tokenizer encoding name.
            analysis: Result of analyze_file().
            elapsed: Seconds spent analyzing.
            top_n: Number of most expensive lines to include.

        Returns:
            The report.
        """
        safety = analysis.llm_safety_analysis
        advanced = analysis.advanced_patterns
        buckets: dict[str, list] = dict(safety.buckets())
        buckets['url'] = advanced.urls
        buckets['consecutive_empty'] = advanced.consecutive_empty
        buckets['long_line'] = advanced.long_lines
        buckets['repeated_phrase'] = analysis.patterns.repeated_phrases

        breakdown = analysis.category_breakdown
        stats = breakdown.get_stats()
        p = analysis.percentiles

        return cls(
            path=path,
            encoding=encoding,
            time=elapsed,
            total_tokens=analysis.total_tokens,
            total_lines=analysis.total_lines,
            total_chars=analysis.total_chars,
            avg_tokens_per_line=analysis.avg_tokens_per_line,
            efficiency_score=analysis.efficiency_score,
            reliability_score=safety.reliability_score,
            total_issues=analysis.total_issues,
            waste_tokens=analysis.waste_tokens,
            potential_savings=analysis.potential_savings,
            issue_counts={name: len(issues) for name, issues in buckets.items()},
            issues={name: [asdict(issue) for issue in issues] for name, issues in buckets.items() if issues},
            recommendations=[RecommendationReport(**asdict(rec)) for rec in analysis.recommendations],
            top_lines=[
                LineReport(
                    line_number=insight.line_number,
                    tokens=insight.tokens,
                    chars=insight.chars,
                    token_char_ratio=round(insight.token_char_ratio, 3),
                    content=insight.content[:80],
                )
                for insight in analysis.get_top_expensive_lines(top_n)
            ],
            percentiles=PercentilesReport(
                min=p.min, p25=p.p25, median=p.median, p75=p.p75, p90=p.p90, p95=p.p95, max=p.max, top10_pct=p.top10_pct
            ),
            density=[DensityBlockReport(**asdict(block)) for block in analysis.density_map.blocks],
            categories=CategoryReport(
                counts={
                    'prose': breakdown.prose,
                    'code_blocks': breakdown.code_blocks,
                    'urls': breakdown.urls,
                    'formatting': breakdown.formatting,
                    'whitespace': breakdown.whitespace,
                },
                percentages=asdict(stats),
            ),
        )

    def to_cli(self, colorize: bool = False) -> str:
        """Format report for CLI output"""
        BOLD = '\033[1m'
        GREEN = '\033[32m'
        YELLOW = '\033[33m'
        RED = '\033[31m'
        CYAN = '\033[36m'
        GREY = '\033[90m'
        RESET = '\033[0m'

        def score_color(score: int) -> str:
            if score >= 80:
                return GREEN
            if score >= 50:
                return YELLOW
            return RED

        def paint(text: str, color: str) -> str:
            return f"{color}{text}{RESET}" if colorize else text

        lines = []

        # Header
        lines.append(paint("Token Analysis", BOLD))
        lines.append(f"Path: {paint(self.path, CYAN)}")
        lines.append(f"Encoding: {self.encoding}")
        lines.append(f"Time: {self.time:.3f}s")
        lines.append("")

        lines.append(
            f"Tokens: {self.total_tokens:,}  Lines: {self.total_lines:,}  Chars: {self.total_chars:,}  "
            f"Avg tokens/line: {self.avg_tokens_per_line:.1f}"
        )
        lines.append(f"Efficiency score: {paint(str(self.efficiency_score), score_color(self.efficiency_score))}/100")
        lines.append(
            f"Reliability score: {paint(str(self.reliability_score), score_color(self.reliability_score))}/100"
        )
        lines.append(f"Waste tokens: {self.waste_tokens:,}  Potential savings: {self.potential_savings:,}")
        lines.append("")

        # Issues
        found = {name: count for name, count in self.issue_counts.items() if count}
        if found:
            lines.append(paint(f"Issues ({self.total_issues}):", BOLD))
            for name, count in found.items():
                lines.append(f"  {name}: {count}")
        else:
            lines.append(paint("No issues found", GREEN))
        lines.append("")

        # Recommendations
        if self.recommendations:
            lines.append(paint("Recommendations:", BOLD))
            for i, rec in enumerate(self.recommendations, 1):
                tag = paint(" [quick win]", GREEN) if rec.is_quick_win else ""
                lines.append(f"  {i}. {rec.title}{tag}")
                lines.append(paint(f"     {rec.description}", GREY))
                lines.append(
                    f"     save ~{rec.estimated_save} tokens ({rec.save_percentage:.1f}%), "
                    f"priority {rec.priority}, {rec.difficulty}"
                )
            lines.append("")

        # Distribution
        percentiles = PercentileStats(**self.percentiles.model_dump())
        lines.append(paint("Tokens per line:", BOLD))
        lines.append(f"  {percentiles.format_percentiles()}")
        lines.append(f"  Top 10% of lines hold {percentiles.top10_pct:.1f}% of tokens")
        lines.append("")

        if self.density:
            density = TokenDensityMap(blocks=[DensityBlock(**block.model_dump()) for block in self.density])
            lines.append(paint("Token density:", BOLD))
            lines.extend(f"  {row}" for row in density.format_heatmap().splitlines())
            lines.append("")

        if any(self.categories.counts.values()):
            lines.append(paint("Categories:", BOLD))
            for name, count in self.categories.counts.items():
                pct = self.categories.percentages.get(name, 0.0)
                lines.append(f"  {name:<12} {render_category_bar(pct):<24} {count:>6} ({pct:.1f}%)")
            lines.append("")

        if self.top_lines:
            lines.append(paint("Most expensive lines:", BOLD))
            for line in self.top_lines:
                lines.append(f"  {line.line_number:>5}: {line.tokens:>4} tokens  {paint(line.content, GREY)}")

        return "\n".join(lines)
