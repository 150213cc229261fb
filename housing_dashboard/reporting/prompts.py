"""
Prompt construction for generated reports.

A prompt is made of a base part describing the analysis and embedding the
utilization data as indented JSON, formatting instructions derived from the
requested tone and length, and optional style instructions that embed the
text of a style template.
"""

import json
from dataclasses import dataclass
from datetime import date, datetime
from textwrap import dedent
from typing import Any, Dict, Iterable, List, Optional

from housing_dashboard.core.database.schemas.hcv_utilization import HCVUtilizationRead
from housing_dashboard.core.database.schemas.reports import ReportFormatting, ReportLength, ReportType

LENGTH_WORDS = {
    ReportLength.BRIEF.value: "200-300 words",
    ReportLength.STANDARD.value: "300-500 words",
    ReportLength.DETAILED.value: "500-800 words",
}

LENGTH_MAX_TOKENS = {
    ReportLength.BRIEF.value: 500,
    ReportLength.STANDARD.value: 1000,
    ReportLength.DETAILED.value: 1500,
}

DEFAULT_TEMPERATURE = 0.5
CUSTOM_REPORT_TEMPERATURE = 0.7


@dataclass(frozen=True)
class GenerationSettings:
    max_tokens: int
    temperature: float


def _record_to_dict(record: Any) -> Dict[str, Any]:
    if isinstance(record, dict):
        return record
    return HCVUtilizationRead.model_validate(record).model_dump(mode="json", by_alias=True)


def _json_default(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def serialize_data(records: Iterable[Any]) -> str:
    """Render utilization records (entities or dicts) as indented JSON."""
    rows: List[Dict[str, Any]] = [_record_to_dict(record) for record in records]
    return json.dumps(rows, indent=2, default=_json_default)


def _length_value(formatting: ReportFormatting) -> str:
    return getattr(formatting.length, "value", formatting.length)


def _tone_value(formatting: ReportFormatting) -> str:
    return getattr(formatting.tone, "value", formatting.tone)


# Non-streaming reports


def executive_summary_prompt(data_json: str) -> str:
    return dedent(
        """
        You are an expert housing analyst for a Housing Authority.
        Analyze the following Housing Choice Voucher (HCV) utilization data and provide a concise executive summary.
        Focus on:
        1. Overall utilization rates and trends
        2. Performance comparisons between different voucher types
        3. Budget implications
        4. Areas of concern or notable achievements
        5. Recommendations for improvement

        Here is the data (JSON format):
        {data}

        Provide a well-structured executive summary (300-500 words) with key insights and actionable recommendations.
        """
    ).format(data=data_json)


def voucher_type_prompt(voucher_type: str, data_json: str) -> str:
    return dedent(
        """
        You are an expert housing analyst for a Housing Authority.
        Analyze the following Housing Choice Voucher (HCV) utilization data for {voucher_type} vouchers.
        Focus on:
        1. Historical trends in utilization rates
        2. Budget allocation and spending efficiency
        3. Factors contributing to current performance
        4. Comparison to industry benchmarks (if inferrable)
        5. Specific recommendations for this voucher type

        Here is the data (JSON format):
        {data}

        Provide a concise but comprehensive report (200-300 words) with key insights and actionable recommendations
        specifically for managing this voucher type.
        """
    ).format(voucher_type=voucher_type, data=data_json)


def budget_forecast_prompt(forecast_months: int, data_json: str) -> str:
    return dedent(
        """
        You are an expert financial analyst for a Housing Authority.
        Based on the following Housing Choice Voucher (HCV) utilization data, provide a budget forecast
        for the next {months} months.

        Focus on:
        1. Projected utilization rates by voucher type
        2. Estimated HAP expenses
        3. Budget utilization forecasts
        4. Potential financial risks or opportunities
        5. Recommendations for budget management

        Here is the historical data (JSON format):
        {data}

        Provide a detailed budget forecast (300-500 words) with month-by-month projections
        and financial management recommendations.
        """
    ).format(months=forecast_months, data=data_json)


NON_STREAMING_SETTINGS = {
    ReportType.EXECUTIVE_SUMMARY.value: GenerationSettings(max_tokens=1000, temperature=DEFAULT_TEMPERATURE),
    ReportType.VOUCHER_ANALYSIS.value: GenerationSettings(max_tokens=800, temperature=DEFAULT_TEMPERATURE),
    ReportType.BUDGET_FORECAST.value: GenerationSettings(max_tokens=1000, temperature=DEFAULT_TEMPERATURE),
}


# Streaming reports


def base_prompt(
    report_type: str,
    data_json: str,
    voucher_type: Optional[str] = None,
    forecast_months: int = 6,
) -> str:
    """Base prompt of a streamed report.

    Raises:
        ValueError: For report types without a base prompt (including custom reports)
    """
    if report_type == ReportType.EXECUTIVE_SUMMARY.value:
        template = """
            You are an expert housing analyst for a Housing Authority.
            Analyze the following Housing Choice Voucher (HCV) utilization data and provide a concise executive summary.

            Focus on:
            1. Overall utilization rates and trends
            2. Performance comparisons between different voucher types
            3. Budget implications
            4. Areas of concern or notable achievements
            5. Recommendations for improvement

            Here is the data (JSON format):
            {data}
            """
    elif report_type == ReportType.VOUCHER_ANALYSIS.value:
        template = """
            You are an expert housing analyst for a Housing Authority.
            Analyze the following Housing Choice Voucher (HCV) utilization data for {voucher_type} vouchers.

            Focus on:
            1. Historical trends in utilization rates
            2. Budget allocation and spending efficiency
            3. Factors contributing to current performance
            4. Comparison to industry benchmarks (if inferrable)
            5. Specific recommendations for this voucher type

            Here is the data (JSON format):
            {data}
            """
    elif report_type == ReportType.BUDGET_FORECAST.value:
        template = """
            You are an expert financial analyst for a Housing Authority.
            Based on the following Housing Choice Voucher (HCV) utilization data, provide a budget forecast
            for the next {months} months.

            Focus on:
            1. Projected utilization rates by voucher type
            2. Estimated HAP expenses
            3. Budget utilization forecasts
            4. Potential financial risks or opportunities
            5. Recommendations for budget management

            Here is the historical data (JSON format):
            {data}
            """
    else:
        raise ValueError(f"No base prompt for report type: {report_type}")

    return dedent(template).format(data=data_json, voucher_type=voucher_type, months=forecast_months)


def formatting_instructions(formatting: ReportFormatting) -> str:
    headings = (
        "- Include clear section headings and structure" if formatting.include_headings else "- Minimal headings"
    )
    recommendations = (
        "- Include specific, actionable recommendations"
        if formatting.include_recommendations
        else "- Focus more on analysis than recommendations"
    )
    return (
        "Please format your response with the following characteristics:\n"
        f"- Tone: {_tone_value(formatting)}\n"
        f"- Length: {LENGTH_WORDS[_length_value(formatting)]}\n"
        f"{headings}\n"
        f"{recommendations}\n"
    )


def custom_formatting_instructions(formatting: ReportFormatting) -> str:
    return (
        "Please format your response with the following characteristics:\n"
        f"- Tone: {_tone_value(formatting)}\n"
        f"- Length: {LENGTH_WORDS[_length_value(formatting)]}\n"
    )


def style_instructions(style_content: Optional[str]) -> str:
    if not style_content:
        return ""
    return (
        "Please use the following style template as a guide for your writing style and structure:\n\n"
        f"{style_content}\n\n"
        "Adapt this style to the current content while maintaining your analytical accuracy.\n"
    )


def build_stream_prompt(
    report_type: str,
    data_json: str,
    formatting: ReportFormatting,
    voucher_type: Optional[str] = None,
    forecast_months: int = 6,
    style_content: Optional[str] = None,
) -> str:
    return "\n".join(
        [
            base_prompt(report_type, data_json, voucher_type=voucher_type, forecast_months=forecast_months),
            formatting_instructions(formatting),
            style_instructions(style_content),
        ]
    )


def build_custom_prompt(
    custom_prompt: str,
    data_json: str,
    formatting: ReportFormatting,
    style_content: Optional[str] = None,
) -> str:
    base = (
        "You are an expert housing analyst for a Housing Authority.\n"
        f"{custom_prompt}\n\n"
        "Here is the Housing Choice Voucher (HCV) utilization data (JSON format):\n"
        f"{data_json}\n"
    )
    return "\n".join([base, custom_formatting_instructions(formatting), style_instructions(style_content)])


def stream_settings(report_type: str, formatting: ReportFormatting) -> GenerationSettings:
    """Token budget from the requested length; custom reports sample hotter."""
    temperature = CUSTOM_REPORT_TEMPERATURE if report_type == ReportType.CUSTOM_REPORT.value else DEFAULT_TEMPERATURE
    return GenerationSettings(max_tokens=LENGTH_MAX_TOKENS[_length_value(formatting)], temperature=temperature)
