import pytest
from click.testing import CliRunner
from unittest.mock import patch

from novel_architect.cli import cli
from novel_architect.errors import BackendError

@pytest.fixture
def runner():
    return CliRunner()

@pytest.fixture
def sample_config(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("""
generation:
  chapters: 1
  parts_per_chapter: 1
  sections_per_part: 2
  summarize_sections: false
""")
    return config_file

@pytest.fixture
def small_outline():
    return [
        {
            "number": 1,
            "title": "Low Tide",
            "summary": "A body surfaces",
            "parts": [
                {
                    "number": 1,
                    "summary": "The first night",
                    "sections": [
                        {"number": 1, "summary": "Vera finds the body."},
                        {"number": 2, "summary": "Vera meets Silas."},
                    ],
                }
            ],
        }
    ]

def test_cli_help(runner):
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'analyze' in result.output
    assert 'outline' in result.output
    assert 'draft' in result.output

def test_analyze_command(runner, sample_config, gateway, bible_payload):
    gateway.queue(bible_payload)
    with patch('novel_architect.pipeline.GeminiGateway', return_value=gateway):
        result = runner.invoke(cli, ['-c', str(sample_config), 'analyze', 'a detective in a rain-soaked city'])

    assert result.exit_code == 0
    assert 'Rain Over Harrow Street' in result.output
    assert 'Vera' in result.output

def test_analyze_reads_idea_file(runner, sample_config, gateway, bible_payload, tmp_path):
    idea_file = tmp_path / "idea.txt"
    idea_file.write_text("A drowned city and a stubborn detective.", encoding="utf-8")
    gateway.queue(bible_payload)
    with patch('novel_architect.pipeline.GeminiGateway', return_value=gateway):
        result = runner.invoke(cli, ['-c', str(sample_config), 'analyze', f'@{idea_file}'])

    assert result.exit_code == 0
    assert "A drowned city and a stubborn detective." in gateway.calls[0]["prompt"]

def test_outline_command(runner, sample_config, gateway, bible_payload, small_outline):
    gateway.queue(bible_payload, small_outline)
    with patch('novel_architect.pipeline.GeminiGateway', return_value=gateway):
        result = runner.invoke(cli, ['-c', str(sample_config), 'outline', 'idea'])

    assert result.exit_code == 0
    assert 'Low Tide' in result.output
    assert 'ch-0-p-0-s-1' in result.output

def test_draft_command(runner, sample_config, gateway, bible_payload, small_outline, tmp_path):
    output_file = tmp_path / "story.txt"
    gateway.queue(bible_payload, small_outline, "Rain hammered the pier.", "More rain.", "Silas smiled.", "He left.")
    with patch('novel_architect.pipeline.GeminiGateway', return_value=gateway):
        result = runner.invoke(cli, [
            '-c', str(sample_config), 'draft', 'idea',
            '--continue-rounds', '1', '--output', str(output_file),
        ])

    assert result.exit_code == 0
    text = output_file.read_text(encoding="utf-8")
    assert text.startswith("Rain Over Harrow Street")
    assert "Chapter 1: Low Tide" in text
    assert "Rain hammered the pier.\n\nMore rain." in text
    assert "Silas smiled.\n\nHe left." in text

def test_backend_failure_is_reported(runner, sample_config, gateway):
    gateway.queue(BackendError("quota exceeded"))
    with patch('novel_architect.pipeline.GeminiGateway', return_value=gateway):
        result = runner.invoke(cli, ['-c', str(sample_config), 'analyze', 'idea'])

    assert result.exit_code != 0
    assert 'quota exceeded' in result.output

def test_missing_idea_file_is_a_usage_error(runner, sample_config, gateway, tmp_path):
    missing = tmp_path / "missing.txt"
    with patch('novel_architect.pipeline.GeminiGateway', return_value=gateway):
        result = runner.invoke(cli, ['-c', str(sample_config), 'analyze', f'@{missing}'])

    assert result.exit_code == 2
    assert 'cannot read' in result.output
    assert not isinstance(result.exception, FileNotFoundError)
    assert gateway.calls == []

def test_bracketed_backend_text_is_printed_literally(runner, sample_config, gateway, bible_payload, small_outline):
    bible_payload["title"] = "The [/end] of Days"
    bible_payload["setting"] = "Harbor [bold] district"
    small_outline[0]["title"] = "Low [/end] Tide"
    gateway.queue(bible_payload, bible_payload, small_outline)
    with patch('novel_architect.pipeline.GeminiGateway', return_value=gateway):
        analyzed = runner.invoke(cli, ['-c', str(sample_config), 'analyze', 'idea'])
        outlined = runner.invoke(cli, ['-c', str(sample_config), 'outline', 'idea'])

    assert analyzed.exit_code == 0
    assert 'The [/end] of Days' in analyzed.output
    assert 'Harbor [bold] district' in analyzed.output
    assert outlined.exit_code == 0
    assert 'Low [/end] Tide' in outlined.output
