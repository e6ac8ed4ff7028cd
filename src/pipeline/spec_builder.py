"""
src/pipeline/spec_builder.py

Smallest well-formed markdown spec the execute_spec tool accepts.
"""


def build_test_spec(title: str, task: str) -> str:
    """
    Render a one-requirement spec.

    >>> print(build_test_spec("Hello World", "Print hello"))
    # Hello World
    <BLANKLINE>
    ## Requirements
    - Print hello
    <BLANKLINE>
    ## Acceptance Criteria
    - Task "Print hello" is completed
    """

    return "\n".join([
        f"# {title}",
        "",
        "## Requirements",
        f"- {task}",
        "",
        "## Acceptance Criteria",
        f'- Task "{task}" is completed',
    ])
