import sys
sys.path.append(".")
import pytest
from proof_tree import Formula, FormationException, tokenize, is_valid_prefix, to_prefix


def test_tokenize():
    assert tokenize("@x(Px > Qx)") == ["@x", "(", "Px", ">", "Qx", ")"]
    assert tokenize("Rab&~Sc") == ["Rab", "&", "~", "Sc"]
    assert tokenize(">PQ") == [">", "P", "Q"]
    assert tokenize("  ( P +\tQ )  ") == ["(", "P", "+", "Q", ")"]


def test_is_valid_prefix():
    assert is_valid_prefix(["P"])
    assert is_valid_prefix(["&", "P", "~", "Q"])
    assert is_valid_prefix(["@x", ">", "Px", "#y", "Rxy"])
    assert not is_valid_prefix([])
    assert not is_valid_prefix(["P", "&", "Q"])
    assert not is_valid_prefix(["&", "P"])
    assert not is_valid_prefix(["&", "P", "Q", "R"])
    assert not is_valid_prefix(["(", "P", ")"])
    assert not is_valid_prefix(["a"])


def test_to_prefix():
    assert to_prefix(["(", "P", ">", "Q", ")"]) == [">", "P", "Q"]
    assert to_prefix(["P", "&", "Q", "+", "R"]) == ["+", "&", "P", "Q", "R"]


def test_infix_and_prefix_agree():
    # 1. each connective, bracketed infix against its prefix form
    assert Formula("(P+Q)") == Formula("+PQ")
    assert Formula("(P&Q)") == Formula("&PQ")
    assert Formula("(P>Q)") == Formula(">PQ")
    assert Formula("(P:Q)") == Formula(":PQ")
    assert Formula("~P") == Formula("~P")
    assert Formula("@x(Px>Qx)") == Formula("@x>PxQx")
    assert Formula("#x(Px&Rxa)") == Formula("#x&PxRxa")
    # ----------------------------------------------
    # 2. nested brackets
    assert Formula("((P+Q)>~R)") == Formula(">+PQ~R")
    assert Formula("(P&(Q&R))") == Formula("&P&QR")


def test_binding_strength():
    # conjunction binds tighter than disjunction, disjunction than conditional ...
    assert Formula("P&Q+R").tokens == ("+", "&", "P", "Q", "R")
    assert Formula("P+Q&R").tokens == ("+", "P", "&", "Q", "R")
    assert Formula("P>Q:R").tokens == (":", ">", "P", "Q", "R")
    assert Formula("P+Q>R").tokens == (">", "+", "P", "Q", "R")
    # ... and negation tightest of all
    assert Formula("~P&Q").tokens == ("&", "~", "P", "Q")
    assert Formula("~Pa+~Qa").tokens == ("+", "~", "Pa", "~", "Qa")
    # quantifiers bind tighter than the binary connectives
    assert Formula("@xPx&Qa").tokens == ("&", "@x", "Px", "Qa")


def test_equal_priority_is_left_associative():
    assert Formula("P&Q&R").tokens == ("&", "&", "P", "Q", "R")
    assert Formula("P>Q>R").tokens == (">", ">", "P", "Q", "R")


def test_unary_operators_apply_to_the_operand_on_their_right():
    assert Formula("~@xPx&Qa").tokens == ("&", "~", "@x", "Px", "Qa")
    assert Formula("@x~Px&Qa").tokens == ("&", "@x", "~", "Px", "Qa")
    assert Formula("~(P&Q)").tokens == ("~", "&", "P", "Q")
    assert Formula("~~P").tokens == ("~", "~", "P")


@pytest.mark.parametrize("text", ["", "P&", "(P&Q", "P)", "P Q", "a", "@xyPx", "&", "P&&Q", "(P+Q))", "Pa1"])
def test_malformed_formulae_are_rejected(text):
    with pytest.raises(FormationException):
        Formula(text)


def test_formation_exception_keeps_message():
    with pytest.raises(FormationException) as info:
        Formula("P&")
    assert "not a well formed formula" in info.value.message


def test_major_operator():
    assert Formula("P").major_operator() == ""
    assert Formula("Rab").major_operator() == ""
    assert Formula("~P").major_operator() == "~"
    assert Formula("(P&Q)").major_operator() == "&"
    assert Formula("@xPx").major_operator() == "@x"
    assert Formula("#y(Py+Qy)").major_operator() == "#y"


def test_major_operands():
    assert Formula("((P+Q)>~R)").major_operands() == [Formula("(P+Q)"), Formula("~R")]
    assert Formula("(@xPx&#yQy)").major_operands() == [Formula("@xPx"), Formula("#yQy")]
    assert Formula("(P:((Q&R)+S))").major_operands() == [Formula("P"), Formula("((Q&R)+S)")]
    assert Formula("~(P&Q)").major_operands() == [Formula("(P&Q)")]
    assert Formula("@x(Px>Qx)").major_operands() == [Formula("(Px>Qx)")]
    assert Formula("Pa").major_operands() == [Formula("Pa")]


def test_quantifier_variable():
    assert Formula("@x(Px>Qx)").is_quantified()
    assert Formula("@x(Px>Qx)").quantifier_variable() == "x"
    assert Formula("#zQz").quantifier_variable() == "z"
    assert not Formula("~@xPx").is_quantified()
    with pytest.raises(ValueError):
        Formula("(P&Q)").quantifier_variable()


def test_get_constants():
    assert Formula("Rab").get_constants() == ["a", "b"]
    assert Formula("(Rba&Sa)").get_constants() == ["b", "a"]
    assert Formula("@x(Rxa>#ySyb)").get_constants() == ["a", "b"]
    assert Formula("@x#yRxy").get_constants() == []
    assert Formula("P").get_constants() == []


def test_get_constants_scopes_bindings_locally():
    # x is bound on the left only
    assert Formula("(@xPx&Qx)").get_constants() == ["x"]
    assert Formula("(#yRyy+@xSxy)").get_constants() == ["y"]


def test_bound_variables():
    assert Formula("#yRxy").bound_variables() == ["y"]
    assert Formula("(@xPx>#y~@xRxy)").bound_variables() == ["x", "y"]
    assert Formula("Rxy").bound_variables() == []


def test_substitute():
    assert Formula("(Px>Qx)").substitute("x", "a") == Formula("(Pa>Qa)")
    body = Formula("@xRxy").major_operands()[0]
    assert body.substitute("x", "b") == Formula("Rby")
    assert Formula("#y(Rxy&Sy)").substitute("x", "c") == Formula("#y(Rcy&Sy)")


def test_get_negation():
    assert Formula("P").get_negation() == Formula("~P")
    assert Formula("(P&Q)").get_negation() == Formula("~&PQ")


def test_is_atom():
    assert Formula("P").is_atom()
    assert Formula("Rab").is_atom()
    assert Formula("~Pa").is_atom()
    assert Formula("~~P").is_atom()
    assert Formula("~~~Rab").is_atom()
    assert not Formula("~(P&Q)").is_atom()
    assert not Formula("(P&Q)").is_atom()
    assert not Formula("@xPx").is_atom()


def test_contradicts():
    for atom in ["P", "Rab", "~Qc"]:
        atom = Formula(atom)
        assert atom.contradicts(atom.get_negation())
        assert atom.get_negation().contradicts(atom)
    assert not Formula("Pa").contradicts(Formula("~Pb"))
    assert not Formula("Pa").contradicts(Formula("Pa"))
    assert Formula("~P").contradicts(Formula("~~P"))
    assert not Formula("P").contradicts(Formula("~~P"))
    assert not Formula("(P&Q)").contradicts(Formula("~(P&Q)"))
    assert not Formula("@xPx").contradicts(Formula("~@xPx"))


def test_equality_and_hash():
    assert Formula("(P&Q)") == Formula("&PQ")
    assert hash(Formula("(P&Q)")) == hash(Formula("&PQ"))
    assert len({Formula("(P&Q)"), Formula("&PQ"), Formula("&QP")}) == 2
    assert Formula("P") != "P"
    assert Formula("Pa") != Formula("Paa")
    assert len(Formula("@x(Px>Qx)")) == 4


def test_str_is_prefix():
    assert str(Formula("(P>Q)")) == ">PQ"
    assert str(Formula("@x(Px&~Qx)")) == "@x&Px~Qx"
    assert repr(Formula("~P")) == "Formula('~P')"
