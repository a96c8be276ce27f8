import dataclasses
import unittest

from minic.SyntacticAnalysis import Ast
from minic.SyntacticAnalysis.AstBuilder import (
    AstFormatError, ast_from_json, ast_to_json, operator_from_string, program_from_json)


def sample_program() -> Ast.ProgramAst:
    return Ast.ProgramAst(Ast.FunctionDefAst(
        Ast.TypeKind.Int, "main",
        [Ast.ParamAst(Ast.TypeKind.Bool, "flag", line=1, column=14)],
        [
            Ast.DeclarationAst(Ast.TypeKind.Int, [Ast.VarDeclAst("x", Ast.NumberLiteralAst(2)), Ast.VarDeclAst("y")]),
            Ast.AssignmentAst("y", Ast.BinaryOpAst(Ast.VariableAst("x"), Ast.Operator.TIMES, Ast.NumberLiteralAst(3))),
            Ast.ExpressionStatementAst(Ast.BoolLiteralAst(False)),
            Ast.ReturnStatementAst(Ast.VariableAst("y")),
        ]))


class RecordingVisitor:
    def __init__(self):
        self.visited = []

    def visit(self, ast):
        self.visited.append(type(ast).__name__)
        return len(self.visited)


class TestNodes(unittest.TestCase):
    def test_accept_forwards_to_visitor(self):
        visitor = RecordingVisitor()
        self.assertEqual(Ast.NumberLiteralAst(1).accept(visitor), 1)
        self.assertEqual(Ast.VariableAst("x").accept(visitor), 2)
        self.assertEqual(visitor.visited, ["NumberLiteralAst", "VariableAst"])

    def test_nodes_are_immutable(self):
        program = sample_program()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            program.function.identifier = "other"
        self.assertIsInstance(program.function.statements, tuple)
        self.assertIsInstance(program.function.statements[0].variables, tuple)

    def test_display(self):
        program = sample_program()
        self.assertEqual(
            str(program),
            "int main(bool flag) {\n"
            "    int x = 2, y;\n"
            "    y = (x * 3);\n"
            "    false;\n"
            "    return y;\n"
            "}")
        self.assertEqual(str(Ast.ReturnStatementAst()), "return;")

    def test_optional_children(self):
        self.assertFalse(Ast.VarDeclAst("x").has_initial_value)
        self.assertTrue(Ast.ReturnStatementAst(Ast.NumberLiteralAst(0)).has_value)

    def test_positions_default_to_unknown(self):
        self.assertEqual((Ast.VariableAst("x").line, Ast.VariableAst("x").column), (-1, -1))


class TestAstBuilder(unittest.TestCase):
    def test_operator_from_string(self):
        self.assertEqual(operator_from_string("+"), Ast.Operator.PLUS)
        self.assertEqual(operator_from_string("/"), Ast.Operator.DIVIDE)
        with self.assertRaises(ValueError):
            operator_from_string("%")

    def test_json_rebuilds_same_tree(self):
        program = sample_program()
        self.assertEqual(program_from_json(ast_to_json(program)), program)

    def test_json_document(self):
        document = {
            "kind": "Program",
            "function": {
                "kind": "FunctionDef", "return_type": "void", "name": "main", "line": 1,
                "statements": [{"kind": "Return"}]}}
        program = program_from_json(document)
        self.assertEqual(program.function.parameters, ())
        self.assertEqual(program.function.line, 1)
        self.assertEqual(program.function.statements, (Ast.ReturnStatementAst(),))

    def test_unknown_kind(self):
        with self.assertRaises(AstFormatError):
            ast_from_json({"kind": "WhileLoop"})

    def test_unknown_operator(self):
        document = {"kind": "BinaryOp", "op": "%", "left": {"kind": "Number", "value": 1}, "right": {"kind": "Number", "value": 2}}
        with self.assertRaises(AstFormatError):
            ast_from_json(document)

    def test_unknown_type(self):
        with self.assertRaises(AstFormatError):
            ast_from_json({"kind": "Param", "type": "float", "name": "x"})

    def test_error_type_is_not_writable(self):
        with self.assertRaises(AstFormatError):
            ast_from_json({"kind": "Param", "type": "error", "name": "x"})

    def test_boolean_is_not_a_number(self):
        with self.assertRaises(AstFormatError):
            ast_from_json({"kind": "Number", "value": True})

    def test_statement_where_expression_expected(self):
        with self.assertRaises(AstFormatError):
            ast_from_json({"kind": "ExprStmt", "value": {"kind": "Return"}})

    def test_missing_field(self):
        with self.assertRaises(AstFormatError):
            ast_from_json({"kind": "Variable"})

    def test_root_must_be_program(self):
        with self.assertRaises(AstFormatError):
            program_from_json({"kind": "Number", "value": 1})
