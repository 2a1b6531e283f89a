"""Tests for classroom/polls.py"""

import sys
sys.path.append(".")

import pytest

from classroom.notifier import Notifier
from classroom.polls import POLL_TOPIC, PollBoard, parse_options
from core.errors import InvalidVote, PollClosed


@pytest.fixture
def events():
    return []


@pytest.fixture
def board(empty_store, events):
    notifier = Notifier()
    notifier.subscribe(POLL_TOPIC, lambda topic, payload: events.append(payload["event"]))
    return PollBoard(empty_store, notifier)


def test_parse_options_from_teacher_input():
    assert parse_options("Not at all, Somewhat, Very well, I can teach it") == [
        "Not at all", "Somewhat", "Very well", "I can teach it"
    ]
    assert parse_options(" a ,, b ,") == ["a", "b"]


def test_start_initializes_counts(board, events):
    poll = board.start("How well do you understand hooks?", ["Low", "High"])
    assert poll.active
    assert poll.responses == {0: 0, 1: 0}
    assert board.active().id == poll.id
    assert events == ["started"]


def test_needs_two_options(board):
    with pytest.raises(InvalidVote):
        board.start("Only one?", ["Yes", "  "])


def test_vote_counts_and_broadcasts(board, events):
    board.start("Q", ["A", "B", "C"])
    board.vote("student1", 2)
    poll = board.vote("student2", 2)
    assert poll.responses[2] == 2
    assert poll.total_votes == 2
    assert events == ["started", "vote", "vote"]


def test_student_votes_once(board):
    board.start("Q", ["A", "B"])
    board.vote("student1", 0)
    with pytest.raises(InvalidVote):
        board.vote("student1", 1)
    assert board.active().total_votes == 1


def test_out_of_range_vote(board):
    board.start("Q", ["A", "B"])
    with pytest.raises(InvalidVote):
        board.vote("student1", 5)


def test_vote_without_poll(board):
    with pytest.raises(PollClosed):
        board.vote("student1", 0)


def test_end_clears_active_poll(board, events):
    board.start("Q", ["A", "B"])
    board.vote("student1", 1)
    final = board.end()
    assert not final.active
    assert final.responses[1] == 1
    assert board.active() is None
    assert events[-1] == "ended"
    with pytest.raises(PollClosed):
        board.vote("student2", 0)


def test_new_poll_replaces_old(board):
    first = board.start("First", ["A", "B"])
    second = board.start("Second", ["C", "D"])
    assert board.active().id == second.id != first.id
