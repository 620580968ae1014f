"""Tests for the Parallel state."""

from __future__ import annotations

import pytest

from stepgraph.core import Chain, GraphValidationError, JsonPath, Parallel, Pass


class TestParallel:
    """Tests for Parallel rendering."""

    def test_branches(self, render):
        """Each branch renders as its own graph."""
        parallel = Parallel("Parallel", result_path="$.results").branch(
            Chain.start(Pass("A1")).next(Pass("A2")), Pass("B")
        )

        assert render(parallel)["States"]["Parallel"] == {
            "Type": "Parallel",
            "ResultPath": "$.results",
            "Branches": [
                {
                    "StartAt": "A1",
                    "States": {"A1": {"Type": "Pass", "Next": "A2"}, "A2": {"Type": "Pass", "End": True}},
                },
                {"StartAt": "B", "States": {"B": {"Type": "Pass", "End": True}}},
            ],
            "End": True,
        }

    def test_options(self, render, fake_task):
        """Parameters, selector and error handling are rendered."""
        handler = Pass("Handler")
        parallel = (
            Parallel(
                "Parallel",
                parameters={"id": JsonPath.string_at("$.id")},
                result_selector={"first": JsonPath.string_at("$[0]")},
            )
            .branch(Pass("Only"))
            .add_retry(max_attempts=2)
            .add_catch(handler, result_path="$.error")
        )

        rendered = render(parallel)["States"]["Parallel"]

        assert rendered["Parameters"] == {"id.$": "$.id"}
        assert rendered["ResultSelector"] == {"first.$": "$[0]"}
        assert rendered["Retry"] == [{"ErrorEquals": ["States.ALL"], "MaxAttempts": 2}]
        assert rendered["Catch"] == [{"ErrorEquals": ["States.ALL"], "Next": "Handler", "ResultPath": "$.error"}]

    def test_no_branches(self, render):
        """A Parallel state needs a branch."""
        with pytest.raises(GraphValidationError, match="at least one branch"):
            render(Parallel("Parallel"))

    def test_chain_to_single_state(self, render):
        """Chain.to_single_state wraps the chain without renaming it."""
        state = Chain.start(Pass("One")).next(Pass("Two")).to_single_state("Wrapped", comment="c")

        rendered = render(state)["States"]["Wrapped"]
        assert rendered["Comment"] == "c"
        assert rendered["Branches"][0]["StartAt"] == "One"
