"""
Tests for hygienic temporary name allocation.
"""

import libcst as cst

from unborrow.core.names import FreshNameAllocator


def test_counter_is_monotonic():
  alloc = FreshNameAllocator("t")
  assert [alloc.fresh() for _ in range(3)] == ["t0", "t1", "t2"]


def test_reserved_names_are_skipped():
  alloc = FreshNameAllocator("t", reserved={"t0", "t2"})
  assert alloc.fresh() == "t1"
  assert alloc.fresh() == "t3"


def test_returned_names_become_reserved():
  alloc = FreshNameAllocator("t")
  name = alloc.fresh()
  assert name in alloc.reserved


def test_for_module_avoids_user_identifiers():
  module = cst.parse_module("_unborrow_arg_0 = 1\ndef _unborrow_arg_1(): pass\nobj._unborrow_arg_2\n")
  alloc = FreshNameAllocator.for_module(module, "_unborrow_arg_")
  assert alloc.fresh() == "_unborrow_arg_3"
