"""Tests for literary analysis services and the analysis registry."""

from typing import Any

import pytest

from manuscript.app.llm.errors import ResponseParseError
from manuscript.app.models.analysis import (
    CharacterVoiceAnalysis,
    PlotStructureAnalysis,
    SentimentArcAnalysis,
)
from manuscript.app.models.common import ProviderId
from manuscript.app.services.analysis import (
    ANALYSES,
    analyze_character_interactions,
    analyze_character_voice,
    analyze_pacing,
    analyze_plot_structure,
    analyze_sentiment_arc,
    get_analysis,
)

CONTENT = '"We leave at dawn," said Mara.\nTom nodded. The sea was a grey wolf.'

SAMPLE_RESULTS: dict[str, dict[str, Any]] = {
    "metaphor": {
        "metaphors": [
            {
                "text": "The sea was a grey wolf",
                "type": "animal metaphor",
                "frequency": 1,
                "contexts": ["opening"],
                "suggestions": [],
            }
        ],
        "summary": "One strong metaphor",
    },
    "characterVoice": {
        "characterAnalyses": [
            {
                "characterName": "Mara",
                "voiceDescription": "Clipped and decisive",
                "consistentLines": ["We leave at dawn"],
                "inconsistentLines": [],
            }
        ],
        "summary": "Consistent",
    },
    "worldBuilding": {
        "consistentElements": [{"element": "Sea", "description": "Hostile", "examples": []}],
        "inconsistencies": [],
        "underdevelopedAreas": [{"area": "Harbour", "suggestion": "Describe it"}],
        "summary": "Mostly consistent",
    },
    "pacing": {
        "sections": [
            {
                "description": "Opening",
                "paceRating": "fast",
                "comment": "Brisk",
                "suggestions": [],
            }
        ],
        "overallPacingAssessment": "Brisk",
        "summary": "Fast start",
    },
    "plotStructure": {
        "identifiedPlotPoints": [
            {"pointName": "Inciting incident", "description": "Departure", "locationInText": "1"}
        ],
        "strengths": ["Hook"],
        "weaknesses": [],
        "comparisonToModel": {"modelName": "Three-Act Structure", "alignmentNotes": "Act I"},
        "summary": "Early setup",
    },
    "theme": {
        "themes": [
            {
                "themeName": "Danger",
                "description": "The sea threatens",
                "occurrences": [{"text": "grey wolf", "locationInText": "line 2"}],
                "developmentAssessment": "Seeded",
            }
        ],
        "summary": "Danger motif",
    },
    "readability": {
        "scores": {
            "fleschReadingEase": 82.1,
            "fleschKincaidGradeLevel": 4.2,
            "gunningFog": 5.0,
        },
        "interpretation": {"readingEase": "Easy", "gradeLevel": "Grade 4"},
        "summary": "Very readable",
    },
    "dialogue": {
        "dialogueToNarrativeRatio": {"dialogue": 0.3, "narrative": 0.7},
        "dialogueTagAnalysis": {
            "overusedTags": [{"tag": "said", "count": 1, "alternatives": []}],
            "varietyScore": 40,
        },
        "speakerDistribution": [{"character": "Mara", "lineCount": 1}],
        "summary": "Sparse dialogue",
    },
    "clarity": {
        "cliches": [{"cliche": "at dawn", "suggestion": "at first light"}],
        "redundancies": [],
        "jargon": [],
        "summary": "Clear",
    },
    "sentiment": {
        "sentimentArc": [
            {"segment": 1, "score": 0.2, "justification": "Resolve"},
            {"segment": 2, "score": -0.4, "justification": "Menace"},
        ],
        "overallTrend": "Darkening",
        "summary": "Tension rises",
    },
    "interaction": {
        "characters": ["Mara", "Tom"],
        "interactions": [
            {
                "characters": ["Mara", "Tom"],
                "interactionType": "cooperation",
                "frequency": 1,
                "keyMoments": ["Departure plan"],
            }
        ],
        "summary": "Allies",
    },
}

EXPECTED_TEMPERATURES = {
    "metaphor": 0.4,
    "characterVoice": 0.4,
    "worldBuilding": 0.3,
    "pacing": 0.4,
    "plotStructure": 0.4,
    "theme": 0.4,
    "readability": 0.1,
    "dialogue": 0.4,
    "clarity": 0.3,
    "sentiment": 0.4,
    "interaction": 0.5,
}

PARAMS = {
    "characterVoice": {"characterNames": ["Mara", "Tom"]},
    "worldBuilding": {"worldRules": "The sea is alive."},
}


def test_registry_covers_every_analysis() -> None:
    assert set(ANALYSES) == set(SAMPLE_RESULTS)
    endpoints = [spec.endpoint for spec in ANALYSES.values()]
    assert len(set(endpoints)) == len(endpoints)


def test_get_analysis_unknown_type() -> None:
    with pytest.raises(KeyError):
        get_analysis("horoscope")


@pytest.mark.parametrize("analysis_type", sorted(SAMPLE_RESULTS))
@pytest.mark.asyncio
async def test_every_analysis_validates_its_schema(
    providers, gateway, analysis_type: str
) -> None:
    """Test that each registered analysis parses a well-formed response."""
    spec = ANALYSES[analysis_type]
    providers[ProviderId.google].queue(SAMPLE_RESULTS[analysis_type])
    params = spec.collect_params(PARAMS.get(analysis_type, {}))

    result = await spec(gateway, CONTENT, params, ProviderId.google)

    assert isinstance(result, spec.schema)
    prompt, options = providers[ProviderId.google].calls[0]
    assert CONTENT in prompt
    assert options.temperature == EXPECTED_TEMPERATURES[analysis_type]
    assert options.json_mode is True


def test_collect_params_requires_task_parameters() -> None:
    spec = ANALYSES["characterVoice"]

    with pytest.raises(ValueError, match="characterNames"):
        spec.collect_params({})
    with pytest.raises(ValueError):
        spec.collect_params({"characterNames": []})

    assert spec.collect_params({"characterNames": ["Mara"], "provider": "openai"}) == {
        "character_names": ["Mara"]
    }


@pytest.mark.parametrize(
    ("analysis_type", "body", "key"),
    [
        ("characterVoice", {"characterNames": "Alice"}, "characterNames"),
        ("characterVoice", {"characterNames": 5}, "characterNames"),
        ("characterVoice", {"characterNames": ["Alice", 3]}, "characterNames"),
        ("worldBuilding", {"worldRules": ["magic is rare"]}, "worldRules"),
        ("plotStructure", {"narrativeModel": 3}, "narrativeModel"),
    ],
)
def test_collect_params_rejects_wrong_types(
    analysis_type: str, body: dict, key: str
) -> None:
    with pytest.raises(ValueError, match=f"Invalid parameter\\(s\\) for {analysis_type}: {key}"):
        ANALYSES[analysis_type].collect_params(body)


def test_collect_params_optional_parameters() -> None:
    spec = ANALYSES["plotStructure"]

    assert spec.collect_params({}) == {}
    assert spec.collect_params({"narrativeModel": "Hero's Journey"}) == {
        "narrative_model": "Hero's Journey"
    }


@pytest.mark.asyncio
async def test_character_voice_prompt_names_characters(providers, gateway) -> None:
    providers[ProviderId.anthropic].queue(SAMPLE_RESULTS["characterVoice"])

    result = await analyze_character_voice(
        gateway, CONTENT, ["Mara", "Tom"], ProviderId.anthropic
    )

    assert isinstance(result, CharacterVoiceAnalysis)
    assert result.character_analyses[0].character_name == "Mara"
    assert "Mara, Tom" in providers[ProviderId.anthropic].prompts[0]


@pytest.mark.asyncio
async def test_plot_structure_defaults_to_three_act(providers, gateway) -> None:
    providers[ProviderId.openai].queue(SAMPLE_RESULTS["plotStructure"])

    result = await analyze_plot_structure(gateway, CONTENT)

    assert isinstance(result, PlotStructureAnalysis)
    assert "Three-Act Structure" in providers[ProviderId.openai].prompts[0]


@pytest.mark.asyncio
async def test_plot_structure_uses_requested_model(providers, gateway) -> None:
    providers[ProviderId.openai].queue(SAMPLE_RESULTS["plotStructure"])

    await analyze_plot_structure(gateway, CONTENT, narrative_model="Save the Cat")

    assert "Save the Cat" in providers[ProviderId.openai].prompts[0]


@pytest.mark.asyncio
async def test_sentiment_accepts_legacy_score_key(providers, gateway) -> None:
    providers[ProviderId.openai].queue(
        {
            "sentimentArc": [{"segment": 1, "sentimentScore": -0.5, "justification": "Grim"}],
            "summary": "Bleak",
        }
    )

    result = await analyze_sentiment_arc(gateway, CONTENT)

    assert isinstance(result, SentimentArcAnalysis)
    assert result.sentiment_arc[0].score == -0.5


@pytest.mark.asyncio
async def test_sentiment_score_out_of_range_is_rejected(providers, gateway) -> None:
    providers[ProviderId.openai].queue(
        {
            "sentimentArc": [{"segment": 1, "score": 3.0, "justification": "Ecstatic"}],
            "summary": "x",
        }
    )

    with pytest.raises(ResponseParseError):
        await analyze_sentiment_arc(gateway, CONTENT)


@pytest.mark.asyncio
async def test_pacing_rating_must_be_known(providers, gateway) -> None:
    payload = {
        "sections": [{"description": "Opening", "paceRating": "glacial", "comment": "Slow"}],
        "overallPacingAssessment": "Slow",
    }
    providers[ProviderId.openai].queue(payload)

    with pytest.raises(ResponseParseError):
        await analyze_pacing(gateway, CONTENT)


@pytest.mark.asyncio
async def test_interaction_must_pair_two_characters(providers, gateway) -> None:
    payload = {
        "characters": ["Mara", "Tom", "Ana"],
        "interactions": [
            {
                "characters": ["Mara", "Tom", "Ana"],
                "interactionType": "conflict",
                "frequency": 2,
            }
        ],
        "summary": "Triangle",
    }
    providers[ProviderId.openai].queue(payload)

    with pytest.raises(ResponseParseError):
        await analyze_character_interactions(gateway, CONTENT)


@pytest.mark.asyncio
async def test_analysis_keeps_extra_notes(providers, gateway) -> None:
    """Test that notes added by verification passes survive validation."""
    payload = {**SAMPLE_RESULTS["pacing"], "verificationNotes": "Checked section 1"}
    providers[ProviderId.openai].queue(payload)

    result = await analyze_pacing(gateway, CONTENT)

    assert result.model_dump(by_alias=True)["verificationNotes"] == "Checked section 1"
