import textwrap

from LuminaNotes import markdown_parser
from LuminaNotes.model import (
    BlankLine,
    BlockQuote,
    CodeBlock,
    Document,
    EquationBlock,
    Heading,
    ListItem,
    Paragraph,
    TableBlock,
)


def test_parse_blocks_in_source_order():
    md_text = textwrap.dedent(
        """\
        # Photosynthesis
        ## Overview
        ### Light reactions
        Plants turn light into **chemical energy**.

        - Chlorophyll
        * Water
        1. First step
        > **Key Idea:** light is energy
        #### Too deep
        """
    )
    blocks = markdown_parser.parse_blocks(md_text)
    assert blocks[:3] == [
        Heading(level=1, text="Photosynthesis"),
        Heading(level=2, text="Overview"),
        Heading(level=3, text="Light reactions"),
    ]
    assert blocks[3] == Paragraph(text="Plants turn light into **chemical energy**.")
    assert isinstance(blocks[4], BlankLine)
    assert blocks[5] == ListItem(ordered=False, text="Chlorophyll")
    assert blocks[6] == ListItem(ordered=False, text="Water")
    assert blocks[7] == ListItem(ordered=True, text="First step", marker="1")
    assert blocks[8] == BlockQuote(text="**Key Idea:** light is energy")
    assert blocks[9] == Paragraph(text="#### Too deep")
    # trailing newline leaves one empty line
    assert isinstance(blocks[10], BlankLine)
    assert len(blocks) == 11


def test_parse_is_deterministic():
    md_text = "# A\n| x | y |\n|---|---|\n| 1 | 2 |\n```py\nprint(1)\n```\n\\[\na\n\\]"
    assert markdown_parser.parse_markdown(md_text) == markdown_parser.parse_markdown(md_text)


def test_parse_markdown_wraps_blocks_and_metadata():
    document = markdown_parser.parse_markdown("Hello", metadata={"topic": "Greetings"})
    assert isinstance(document, Document)
    assert list(document.blocks) == [Paragraph(text="Hello")]
    assert document.metadata == {"topic": "Greetings"}


def test_empty_input_yields_blank_line():
    assert markdown_parser.parse_blocks("") == [BlankLine()]


def test_ordered_marker_is_preserved():
    blocks = markdown_parser.parse_blocks("7. Seventh item")
    assert blocks == [ListItem(ordered=True, text="Seventh item", marker="7")]


def test_number_without_space_keeps_its_text():
    assert markdown_parser.parse_blocks("3.14 is pi") == [ListItem(ordered=True, text="3.14 is pi", marker="3")]
    assert markdown_parser.parse_blocks("7.") == [ListItem(ordered=True, text="7.", marker="7")]


def test_indented_list_items_are_trimmed():
    blocks = markdown_parser.parse_blocks("   - nested looking\n  12. twelve")
    assert blocks == [
        ListItem(ordered=False, text="nested looking"),
        ListItem(ordered=True, text="twelve", marker="12"),
    ]


def test_pipe_table_with_separator():
    md_text = "| Name | Symbol |\n|------|--------|\n| Water | H2O |\n| Salt | NaCl |"
    blocks = markdown_parser.parse_blocks(md_text)
    assert blocks == [
        TableBlock(header=("Name", "Symbol"), rows=(("Water", "H2O"), ("Salt", "NaCl"))),
    ]


def test_pipeless_table_with_separator():
    blocks = markdown_parser.parse_blocks("A|B\n-|-\n1|2")
    assert len(blocks) == 1
    table = blocks[0]
    assert isinstance(table, TableBlock)
    assert list(table.header) == ["A", "B"]
    assert [list(row) for row in table.rows] == [["1", "2"]]


def test_prose_with_pipes_ends_pipeless_table():
    md_text = "A|B\n-|-\n1|2\n3|4\nThe value \\(|x|\\) is positive."
    blocks = markdown_parser.parse_blocks(md_text)
    assert blocks == [
        TableBlock(header=("A", "B"), rows=(("1", "2"), ("3", "4"))),
        Paragraph(text="The value \\(|x|\\) is positive."),
    ]


def test_pipeless_table_ends_at_line_without_pipe():
    blocks = markdown_parser.parse_blocks("A|B\n-|-\n1|2\nplain")
    assert blocks == [TableBlock(header=("A", "B"), rows=(("1", "2"),)), Paragraph(text="plain")]


def test_pipeless_lines_without_separator_are_paragraphs():
    blocks = markdown_parser.parse_blocks("A|B\nnot-a-sep\n1|2")
    assert blocks == [Paragraph(text="A|B"), Paragraph(text="not-a-sep"), Paragraph(text="1|2")]


def test_lone_pipe_line_is_paragraph():
    blocks = markdown_parser.parse_blocks("| just a line |\nafter")
    assert blocks == [Paragraph(text="| just a line |"), Paragraph(text="after")]


def test_table_requires_dash_in_second_row():
    blocks = markdown_parser.parse_blocks("| a | b |\n| c | d |")
    assert all(isinstance(block, Paragraph) for block in blocks)


def test_table_closing_line_is_redispatched():
    md_text = "| a | b |\n|---|---|\n| 1 | 2 |\n## After table"
    blocks = markdown_parser.parse_blocks(md_text)
    assert isinstance(blocks[0], TableBlock)
    assert blocks[1] == Heading(level=2, text="After table")


def test_table_followed_by_fence_opens_code_block():
    md_text = "| a |\n|---|\n| 1 |\n```\ncode\n```"
    blocks = markdown_parser.parse_blocks(md_text)
    assert isinstance(blocks[0], TableBlock)
    assert blocks[1] == CodeBlock(language=None, raw_lines=("code",))


def test_ragged_table_keeps_cell_counts():
    md_text = "| a | b | c |\n|---|---|---|\n| 1 |\n| 1 | 2 | 3 | 4 |"
    table = markdown_parser.parse_blocks(md_text)[0]
    assert isinstance(table, TableBlock)
    assert [len(row) for row in table.rows] == [1, 4]


def test_table_at_end_of_input_is_flushed():
    blocks = markdown_parser.parse_blocks("text\n| a | b |\n|---|---|")
    assert blocks[0] == Paragraph(text="text")
    assert blocks[1] == TableBlock(header=("a", "b"), rows=())


def test_fenced_code_is_opaque():
    md_text = "```python\n# not a heading\n**not bold**\n| a |\n\\[\n```"
    blocks = markdown_parser.parse_blocks(md_text)
    assert blocks == [
        CodeBlock(language="python", raw_lines=("# not a heading", "**not bold**", "| a |", "\\[")),
    ]


def test_code_keeps_indentation():
    blocks = markdown_parser.parse_blocks("```\ndef f():\n    return 1\n```")
    assert blocks[0].code == "def f():\n    return 1"


def test_unterminated_fence_is_salvaged():
    blocks = markdown_parser.parse_blocks("```js\ncode here")
    assert blocks == [CodeBlock(language="js", raw_lines=("code here",), unterminated=True)]


def test_only_opening_fence_still_yields_a_block():
    blocks = markdown_parser.parse_blocks("```")
    assert blocks == [CodeBlock(language=None, raw_lines=(), unterminated=True)]


def test_multiline_math_block():
    md_text = "\\[\nE = mc^2\n\\quad F = ma\n\\]\nafter"
    blocks = markdown_parser.parse_blocks(md_text)
    assert blocks[0] == EquationBlock(latex="E = mc^2\n\\quad F = ma")
    assert blocks[1] == Paragraph(text="after")


def test_single_line_math_block():
    blocks = markdown_parser.parse_blocks("  \\[ PV = nRT \\]  ")
    assert blocks == [EquationBlock(latex=" PV = nRT ")]


def test_math_block_contents_are_not_parsed():
    md_text = "\\[\n# x\n```\n| a |\n\\]"
    blocks = markdown_parser.parse_blocks(md_text)
    assert blocks == [EquationBlock(latex="# x\n```\n| a |")]


def test_unterminated_math_block_is_salvaged():
    blocks = markdown_parser.parse_blocks("intro\n\\[\nx^2 + y^2")
    assert blocks[0] == Paragraph(text="intro")
    assert blocks[1] == EquationBlock(latex="x^2 + y^2", unterminated=True)


def test_crlf_line_endings():
    blocks = markdown_parser.parse_blocks("# Title\r\nBody\r\n")
    assert blocks == [Heading(level=1, text="Title"), Paragraph(text="Body"), BlankLine()]


def test_arbitrary_text_never_raises():
    noise = "\x00\x01|\n|-\n```\\[\n\ufffd**`\\(\n> \n-"
    blocks = markdown_parser.parse_blocks(noise)
    assert blocks
