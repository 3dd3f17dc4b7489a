"""Test suite for the informal form-state engine.

This package contains tests for:
- Validation engine (rule evaluation, field spec shape checks)
- Field and form transforms (validity, dirtiness, lifecycle flags)
- Subscription broker (ordering, handles, removal)
- Submit-attempt phase machine
- Form container and adapter bindings
- Integration scenarios (rejection, success, failure, removal)
"""
