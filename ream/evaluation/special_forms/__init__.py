"""Registry of special forms for the Ream evaluator.

Maps AST node types to handler functions that implement non-standard
evaluation rules. The evaluator consults this table before ordinary
procedure application.
"""

from ream import ast
from ream.evaluation.special_forms.define_form import define_form
from ream.evaluation.special_forms.if_form import if_form
from ream.evaluation.special_forms.lambda_form import lambda_form
from ream.evaluation.special_forms.quote_forms import quote_form, datum_to_value
from ream.evaluation.special_forms.seq_form import seq_form

SPECIAL_FORMS = {
    ast.Definition: define_form,
    ast.Conditional: if_form,
    ast.LambdaExpression: lambda_form,
    ast.Sequence: seq_form,
}

__all__ = ["SPECIAL_FORMS", "quote_form", "datum_to_value"]
