from calcserve.tools.evalmath import run


def test_evalmath_success():
    out = run({"expr": "2+3*5"})
    assert out == {"expr": "2+3*5", "result": "17", "final_answer": "17", "success": True}


def test_evalmath_glyphs():
    out = run({"expr": "7 ÷ 2"})
    assert out["result"] == "3.5"


def test_evalmath_division_by_zero():
    out = run({"expr": "3/0"})
    assert out["success"] is False
    assert out["error"] == "division_by_zero"
    assert out["final_answer"] == "Error: Cannot divide by zero"


def test_evalmath_invalid_character_detail():
    out = run({"expr": "2$3"})
    assert out["error"] == "invalid_character"
    assert out["detail"] == {"char": "$", "position": 1}


def test_evalmath_missing_expr_is_empty():
    out = run({})
    assert out["error"] == "empty_expression"


def test_evalmath_bad_inputs():
    assert run("2+2")["error"] == "invalid_inputs"
    assert run({"expr": 4})["error"] == "invalid_args"
