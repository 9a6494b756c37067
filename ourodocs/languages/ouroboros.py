"""
Ouroboros language definition.

Category order is the precedence order: at any position the first category
whose rule matches claims the text. Because of that, words listed both as
keywords and in the boolean, builtin or type tables always come out as
keywords.
"""

from __future__ import annotations

import re

from ourodocs.core.grammar import Category, Grammar, GrammarRef, LanguageDefinition, MatchRule


KEYWORDS = (
    'let', 'const', 'fn', 'function', 'return', 'if', 'else', 'while', 'for',
    'true', 'false', 'class', 'new', 'import', 'public', 'private',
    'protected', 'static', 'null', 'int', 'float', 'bool', 'string', 'void',
    'print', 'struct', 'this', 'extends', 'super', 'break', 'continue',
)

BOOLEANS = ('true', 'false')

TYPES = ('int', 'float', 'bool', 'string', 'void')

BUILTINS = (
    'print', 'to_string', 'string_concat', 'string_length',
    'opengl_init', 'opengl_create_context', 'opengl_destroy_context',
    'opengl_clear', 'opengl_draw_arrays', 'opengl_swap_buffers',
    'vulkan_init', 'vulkan_cleanup',
    'voxel_engine_create', 'voxel_create_world', 'voxel_render_frame',
    'ml_engine_create',
    'init_gui', 'draw_window', 'draw_label', 'draw_button', 'gui_message_loop',
    'connect_to_server', 'http_get',
    'register_event', 'trigger_event', 'set_timeout',
)


def _words(words: tuple) -> str:
    return r'\b(?:' + '|'.join(words) + r')\b'


# ${...} with up to two levels of nested braces
INTERPOLATION = r'\$\{(?:[^{}]|\{(?:[^{}]|\{[^}]*\})*\})+\}'

INTERPOLATION_GRAMMAR = Grammar.build(
    [
        (Category.INTERPOLATION_PUNCTUATION, MatchRule(r'^\$\{|\}\Z', alias=Category.PUNCTUATION)),
    ],
    rest=GrammarRef.ROOT,
)

STRING_GRAMMAR = Grammar.build([
    (Category.INTERPOLATION, MatchRule(INTERPOLATION, inside=INTERPOLATION_GRAMMAR)),
])

GRAMMAR = Grammar.build([
    (Category.COMMENT, [
        # Block comments run to end of input when unterminated
        MatchRule(r'/\*[\s\S]*?(?:\*/|\Z)', lookbehind=r'^|[^\\]'),
        MatchRule(r'//.*', lookbehind=r'^|[^\\:]', greedy=True),
    ]),
    (Category.STRING, MatchRule(r'"(?:\\.|[^\\"])*"', greedy=True, inside=STRING_GRAMMAR)),
    (Category.KEYWORD, _words(KEYWORDS)),
    (Category.BOOLEAN, _words(BOOLEANS)),
    (Category.NUMBER, MatchRule(
        r'\b0x[\da-f]+\b|(?:\b\d+(?:\.\d*)?|\B\.\d+)(?:e[+-]?\d+)?',
        flags=re.IGNORECASE,
    )),
    (Category.OPERATOR, r'[<>]=?|[!=]=?=?|--?|\+\+?|&&?|\|\|?|[?*/~^%]'),
    (Category.PUNCTUATION, r'[{}\[\];(),.:]'),
    (Category.CLASS_NAME, MatchRule(r'\w+', lookbehind=r'\b(?:class|extends|new|struct)\s+')),
    (Category.FUNCTION, MatchRule(r'\w+', lookbehind=r'\b(?:function|fn)\s+')),
    (Category.BUILTIN, _words(BUILTINS)),
    (Category.TYPE, MatchRule(_words(TYPES) + r'\s+(?=\w)', alias=Category.BUILTIN)),
    (Category.CONSTANT, r'\b[A-Z_][A-Z0-9_]*\b'),
    (Category.PROPERTY, MatchRule(r'[\w$]+', lookbehind=r'\.')),
])


class OuroborosLanguage(LanguageDefinition):
    """Ouroboros language definition."""

    name = "ouroboros"
    display_name = "Ouroboros"
    aliases = ("ouro",)
    file_extensions = (".ouro",)
    mime_types = ("text/x-ouroboros",)

    grammar = GRAMMAR
