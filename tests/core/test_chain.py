"""Tests for chaining states into definitions."""

from __future__ import annotations

import pytest

from stepgraph.core import (
    CatchProps,
    Chain,
    ChainingError,
    Choice,
    Condition,
    Fail,
    JsonPath,
    Parallel,
    Pass,
    State,
    StateMachineFragment,
    Succeed,
    Wait,
    WaitTime,
)
from stepgraph.core.duration import Duration


class ReusableChoice(StateMachineFragment):
    def __init__(self, id: str) -> None:
        super().__init__(id)
        choice = (
            Choice("Choice")
            .when(Condition.string_equals("$.branch", "left"), Pass("Left Branch"))
            .when(Condition.string_equals("$.branch", "right"), Pass("Right Branch"))
        )
        self._start = choice
        self._ends = choice.afterwards().end_states

    @property
    def start_state(self):
        return self._start

    @property
    def end_states(self):
        return self._ends


class TestChaining:
    """Tests for next() on states and chains."""

    def test_single_state(self, render):
        """A single state is a complete definition."""
        assert render(Pass("Only")) == {
            "StartAt": "Only",
            "States": {"Only": {"Type": "Pass", "End": True}},
        }

    def test_sequence_of_two_states(self, render):
        """Chain.start(a).next(b) links a to b and ends at b."""
        a = Pass("passA")
        b = Pass("passB")

        chain = Chain.start(a).next(b)

        assert render(chain) == {
            "StartAt": "passA",
            "States": {
                "passA": {"Type": "Pass", "Next": "passB"},
                "passB": {"Type": "Pass", "End": True},
            },
        }

    def test_chain_keeps_start_and_takes_target_ends(self):
        """A chain starts at the first state and ends at the last one added."""
        a, b, c = Pass("a"), Pass("b"), Pass("c")

        chain = a.next(b).next(c)

        assert chain.start_state is a
        assert chain.end_states == [c]
        assert chain.id == "a...c"

    def test_rendering_from_start_state_only(self, render):
        """The definition is reachable from the start state alone."""
        a, b, c = Pass("a"), Pass("b"), Wait("c", time=WaitTime.duration(Duration.seconds(10)))
        a.next(b).next(c)

        rendered = render(a)

        assert list(rendered["States"]) == ["a", "b", "c"]
        assert rendered["States"]["c"] == {"Type": "Wait", "Seconds": 10, "End": True}

    def test_chain_can_be_appended_to(self, render):
        """A chain can be continued with another chain."""
        first = Pass("One").next(Pass("Two"))
        second = Pass("Three").next(Pass("Four"))

        rendered = render(first.next(second))

        assert rendered["States"]["Two"] == {"Type": "Pass", "Next": "Three"}
        assert rendered["States"]["Four"] == {"Type": "Pass", "End": True}

    def test_fragment_in_the_middle_of_a_chain(self, render):
        """A fragment's ends are continued with the next state."""
        before = Pass("Before")
        after = Pass("After")

        chain = before.next(ReusableChoice("Reusable")).next(after)

        assert render(chain) == {
            "StartAt": "Before",
            "States": {
                "Before": {"Type": "Pass", "Next": "Choice"},
                "Choice": {
                    "Type": "Choice",
                    "Choices": [
                        {"Variable": "$.branch", "StringEquals": "left", "Next": "Left Branch"},
                        {"Variable": "$.branch", "StringEquals": "right", "Next": "Right Branch"},
                    ],
                },
                "Left Branch": {"Type": "Pass", "Next": "After"},
                "Right Branch": {"Type": "Pass", "Next": "After"},
                "After": {"Type": "Pass", "End": True},
            },
        }

    def test_succeed_cannot_be_chained_onto(self):
        """Continuing after a Succeed state raises."""
        with pytest.raises(ChainingError, match="does not allow it"):
            Pass("Pass").next(Succeed("Succeed")).next(Pass("Other"))

    def test_fail_cannot_be_chained_onto(self):
        """Continuing after a Fail state raises."""
        with pytest.raises(ChainingError):
            Pass("Pass").next(Fail("Fail", error="X", cause="Y")).next(Pass("Other"))

    def test_terminal_state_next_raises(self):
        """Calling next() on a terminal state raises."""
        with pytest.raises(ChainingError, match="cannot be followed"):
            Succeed("Done").next(Pass("After"))

    def test_next_can_only_be_set_once(self):
        """A state has at most one next state."""
        a = Pass("a")
        a.next(Pass("b"))

        with pytest.raises(ChainingError, match="already has a next state"):
            a.next(Pass("c"))

    def test_chaining_errors_are_value_errors(self):
        """Callers can catch the builtin ValueError."""
        with pytest.raises(ValueError):
            Succeed("Done").next(Pass("After"))

    def test_unconstrained_gotos(self, render):
        """A chain may jump back to an earlier state."""
        one, two = Pass("One"), Pass("Two")

        chain = one.next(two).next(one)

        assert render(chain) == {
            "StartAt": "One",
            "States": {
                "One": {"Type": "Pass", "Next": "Two"},
                "Two": {"Type": "Pass", "Next": "One"},
            },
        }


class TestChoiceChaining:
    """Tests for continuing after Choice states."""

    def test_afterwards_skips_failure_branch(self, render):
        """Branches ending in Fail are not continued."""
        yes = Pass("Yes")
        no = Fail("No", error="Failure", cause="Wrong branch")
        finally_ = Pass("Finally")
        choice = Choice("Choice").when(Condition.string_equals("$.foo", "bar"), yes).otherwise(no)

        choice.afterwards().next(finally_)

        assert render(choice) == {
            "StartAt": "Choice",
            "States": {
                "Choice": {
                    "Type": "Choice",
                    "Choices": [{"Variable": "$.foo", "StringEquals": "bar", "Next": "Yes"}],
                    "Default": "No",
                },
                "Yes": {"Type": "Pass", "Next": "Finally"},
                "No": {"Type": "Fail", "Error": "Failure", "Cause": "Wrong branch"},
                "Finally": {"Type": "Pass", "End": True},
            },
        }

    def test_afterwards_include_otherwise(self, render):
        """include_otherwise makes the next state the default."""
        chain = (
            Choice("Choice")
            .when(Condition.string_equals("$.foo", "bar"), Pass("Yes"))
            .afterwards(include_otherwise=True)
            .next(Pass("Finally"))
        )

        assert render(chain) == {
            "StartAt": "Choice",
            "States": {
                "Choice": {
                    "Type": "Choice",
                    "Choices": [{"Variable": "$.foo", "StringEquals": "bar", "Next": "Yes"}],
                    "Default": "Finally",
                },
                "Yes": {"Type": "Pass", "Next": "Finally"},
                "Finally": {"Type": "Pass", "End": True},
            },
        }

    def test_include_otherwise_with_existing_default_raises(self):
        """include_otherwise conflicts with an existing default."""
        choice = Choice("Choice").when(Condition.is_present("$.a"), Pass("A")).otherwise(Pass("B"))

        with pytest.raises(ChainingError, match="already has an 'otherwise' transition"):
            choice.afterwards(include_otherwise=True)

    def test_otherwise_can_only_be_set_once(self):
        """A Choice has one default."""
        choice = Choice("Choice").otherwise(Pass("A"))

        with pytest.raises(ChainingError, match="already has a default"):
            choice.otherwise(Pass("B"))

    def test_choice_cannot_be_continued_directly(self):
        """Choice.next() raises; use afterwards()."""
        with pytest.raises(ChainingError):
            Choice("Choice").next(Pass("After"))

    def test_choice_without_rules_fails_rendering(self, render):
        """A Choice needs at least one when() rule."""
        with pytest.raises(ValueError, match="must have at least one 'when' condition"):
            render(Choice("Empty").otherwise(Pass("A")))

    def test_choice_rule_comment(self, render):
        """A rule comment is rendered on the rule."""
        choice = Choice("Choice").when(Condition.is_present("$.a"), Pass("A"), comment="has a")

        rendered = render(choice)

        assert rendered["States"]["Choice"]["Choices"][0]["Comment"] == "has a"


class TestErrorHandlers:
    """Tests for Catch handlers and chaining."""

    def test_states_can_have_error_branches(self, render, fake_task):
        """A catch handler is rendered and reachable."""
        task1 = fake_task("Task1")
        failure = Fail("Failed", error="DidNotWork", cause="We got stuck")

        chain = task1.add_catch(failure)

        assert render(chain) == {
            "StartAt": "Task1",
            "States": {
                "Task1": {
                    "Type": "Task",
                    "Resource": "resource",
                    "End": True,
                    "Catch": [{"ErrorEquals": ["States.ALL"], "Next": "Failed"}],
                },
                "Failed": {"Type": "Fail", "Error": "DidNotWork", "Cause": "We got stuck"},
            },
        }

    def test_retries_and_errors_with_result_path(self, render, fake_task):
        """Retry and Catch options are rendered."""
        task1 = fake_task("Task1")
        failure = Fail("Failed", error="DidNotWork", cause="We got stuck")

        task1.add_retry(errors=["HTTPError"], max_attempts=2)
        task1.add_catch(failure, result_path="$.some_error")
        task1.next(Pass("Next"))

        state = render(task1)["States"]["Task1"]

        assert state["Retry"] == [{"ErrorEquals": ["HTTPError"], "MaxAttempts": 2}]
        assert state["Catch"] == [
            {"ErrorEquals": ["States.ALL"], "Next": "Failed", "ResultPath": "$.some_error"}
        ]

    def test_discarded_catch_result_path_renders_null(self, render, fake_task):
        """JsonPath.DISCARD renders as a null ResultPath."""
        task1 = fake_task("Task1").add_catch(Pass("Handler"), CatchProps(result_path=JsonPath.DISCARD))

        assert render(task1)["States"]["Task1"]["Catch"][0]["ResultPath"] is None

    def test_chaining_does_not_continue_from_handler(self, render, fake_task):
        """next() after add_catch() continues the task, not the handler."""
        task1, task2 = fake_task("Task1"), fake_task("Task2")
        error_handler = Pass("ErrorHandler")

        chain = task1.add_catch(error_handler).next(task2)

        assert render(chain) == {
            "StartAt": "Task1",
            "States": {
                "Task1": {
                    "Type": "Task",
                    "Resource": "resource",
                    "Next": "Task2",
                    "Catch": [{"ErrorEquals": ["States.ALL"], "Next": "ErrorHandler"}],
                },
                "Task2": {"Type": "Task", "Resource": "resource", "End": True},
                "ErrorHandler": {"Type": "Pass", "End": True},
            },
        }

    def test_shared_error_handler(self, render, fake_task):
        """Several states can share one handler."""
        task1, task2, task3 = fake_task("Task1"), fake_task("Task2"), fake_task("Task3")
        handler = Pass("ErrorHandler")

        chain = task1.add_catch(handler).next(task2.add_catch(handler)).next(task3.add_catch(handler))

        states = render(chain)["States"]
        assert list(states) == ["Task1", "Task2", "ErrorHandler", "Task3"]
        assert states["Task3"]["End"] is True
        assert all(states[name]["Catch"][0]["Next"] == "ErrorHandler" for name in ("Task1", "Task2", "Task3"))

    def test_wrap_chain_and_attach_error_handler(self, render, fake_task):
        """to_single_state() wraps a chain in a Parallel that can catch."""
        chain = fake_task("Task1").next(fake_task("Task2")).to_single_state("Wrapped")
        chain.add_catch(Pass("ErrorHandler"))

        assert render(chain) == {
            "StartAt": "Wrapped",
            "States": {
                "Wrapped": {
                    "Type": "Parallel",
                    "Branches": [
                        {
                            "StartAt": "Task1",
                            "States": {
                                "Task1": {"Type": "Task", "Resource": "resource", "Next": "Task2"},
                                "Task2": {"Type": "Task", "Resource": "resource", "End": True},
                            },
                        }
                    ],
                    "Catch": [{"ErrorEquals": ["States.ALL"], "Next": "ErrorHandler"}],
                    "End": True,
                },
                "ErrorHandler": {"Type": "Pass", "End": True},
            },
        }


class TestFindReachableStates:
    """Tests for State.find_reachable_states()."""

    def test_states_in_chain_order(self):
        """States are returned in the order they are first reached."""
        state1, state2, state3 = Pass("State1"), Pass("State2"), Pass("State3")
        definition = state1.next(state2).next(state3)

        assert State.find_reachable_states(definition.start_state) == [state1, state2, state3]

    def test_unreachable_states_are_excluded(self):
        """Only states after the start are returned."""
        state1, state2, state3 = Pass("State1"), Pass("State2"), Pass("State3")
        state1.next(state2).next(state3)

        assert State.find_reachable_states(state2) == [state2, state3]

    def test_choice_and_parallel(self):
        """Choice targets are followed; Parallel branches are not entered by default."""
        main = Choice("MainChoice")
        state_a, state_b = Pass("StateA"), Pass("StateB")
        parallel_a, parallel_b = Pass("ParallelA"), Pass("ParallelB")
        run_parallel = Parallel("RunParallel")
        final = Pass("FinalState")
        run_parallel.branch(parallel_a)
        run_parallel.branch(parallel_b)
        main.when(Condition.string_equals("$.myInput", "A"), state_a)
        main.when(Condition.string_equals("$.myInput", "B"), state_b)
        state_a.next(run_parallel)
        run_parallel.next(final)
        main.otherwise(state_a)

        assert State.find_reachable_states(main) == [main, state_a, state_b, run_parallel, final]
        assert State.find_reachable_states(state_b) == [state_b]

    def test_include_branches(self):
        """include_branches descends into nested graphs."""
        inner = Pass("Inner")
        parallel = Parallel("P").branch(inner)

        assert State.find_reachable_states(parallel, include_branches=True) == [parallel, inner]

    def test_error_handlers_can_be_excluded(self, fake_task):
        """include_error_handlers=False skips catch targets."""
        task = fake_task("Task").add_catch(Pass("Handler"))

        assert State.find_reachable_states(task, include_error_handlers=False) == [task]

    def test_cycles_terminate(self):
        """A back edge does not revisit states."""
        a, b = Pass("a"), Pass("b")
        a.next(b).next(a)

        assert State.find_reachable_states(a) == [a, b]

    def test_reachable_end_states(self):
        """End states are the states with no outgoing transition."""
        a, b, c = Pass("a"), Pass("b"), Succeed("c")
        choice = Choice("choice").when(Condition.is_present("$.x"), b).otherwise(c)
        a.next(choice)

        assert State.find_reachable_end_states(a) == [c, b]
