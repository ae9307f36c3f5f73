"""Render the hash list and confirmation documents.

Both documents are self-contained HTML pages sharing one fixed stylesheet.
They are pure functions of (report, settings): the same inputs always produce
byte-identical output, because the pages are bundled into the exported
archive next to the machine-readable report data.

Settings fields are inserted verbatim.
"""

from datetime import date
from typing import List, Sequence

from hashmaker.models import HashReport, ReportSettings, TreeNode

from .tree_builder import build_tree

HASH_TOOL_NAME = "HashMaker v3.0"

FOLDER_RULE = '<hr class="hr_folder_name">'

# Fixed English month names; strftime("%B") would follow the process locale.
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

STYLESHEET = """\
<style type="text/css">
  @page { size: a4; }
  body { font-family: "돋움", "Dotum"; font-size: 12pt; line-height: 1.5em; }
  h1, h2, h3, h4, h5, h6 { margin: 0px; padding: 5px; display: inline; }
  .table_hash_result {
    width: 95%; padding: 0; margin: 0 0 0 2.0em;
    border: 1.5pt solid #000; border-spacing: 0px; border-collapse: collapse;
    text-indent: 0.5em;
  }
  .table_tester { width: 100%; padding: 0; border: 0; border-spacing: 0px; border-collapse: collapse; }
  .table_tester tr, td { padding: 0px; }
  .div_list { margin-left: 4em; text-indent: -1.2em; }
  .div_list_descryption { margin-left: 4em; text-indent: -1.2em; line-height: 1.2em; word-break: keep-all; }
  .div_hash_result_descryption { text-indent: 0em; margin-left: 0.5em; }
  .div_hash_result_code {
    font-family: "돋움체", "DotumChe"; font-weight: bold; letter-spacing: 0.05em;
    text-indent: 0em; margin-left: 1em; word-break: break-all;
  }
  .div_hash_result_code2 {
    font-family: "돋움체", "DotumChe"; font-weight: bold; letter-spacing: 0.05em;
    text-indent: 0em; margin-left: 4em; word-break: break-all;
  }
  .div_hash_code_list { font-family: "돋움체", "DotumChe"; letter-spacing: 0.05em; word-break: break-all; }
  .div_tester { text-indent: 4.1em; }
  .div_tester2 { text-indent: 5.5em; }
  .div_tester_signiture { text-align: right; margin-right: 2em; }
  .div_subject { font-size: 24pt; font-weight: bold; text-align: center; text-decoration: underline; }
  .div_bold { font-weight: bold; }
  .div_date { text-align: center; }
  .div_hash_list_hash_code { margin-top: -0.5em; margin-bottom: -1em; }
  .div_hash_code_page { page-break-before: always; }
  .hr_folder_name {
    margin: 3px 0; padding: 0; height: 0px;
    color: #fff; background-color: #fff; border: 0px; border-top: 1px dotted #000;
  }
</style>"""


def format_test_date(test_date: str) -> str:
    """Format an ISO date as e.g. "October 19, 2026".

    Returns:
        The formatted date, or "Invalid Date" if the value does not parse.
    """
    try:
        parsed = date.fromisoformat(test_date.strip())
    except (AttributeError, ValueError):
        return "Invalid Date"
    return f"{MONTH_NAMES[parsed.month - 1]} {parsed.day}, {parsed.year}"


def _document(title: str, body_lines: Sequence[str]) -> str:
    lines = [
        "<!DOCTYPE HTML>",
        "<html>",
        "<head>",
        '<meta charset="utf-8" />',
        f"<title>{title}</title>",
        STYLESHEET,
        "</head>",
        "<body>",
    ]
    lines.extend(body_lines)
    lines.extend(["</body>", "</html>"])
    return "\n".join(lines) + "\n"


def render_tree_lines(nodes: Sequence[TreeNode]) -> List[str]:
    """Render tree nodes depth-first into hash list lines.

    A folder title emits rule, title and rule, then its children (an empty
    folder emits the two rules with nothing between). A summary emits the
    double-diamond line with the folder's aggregate hash, a file the
    single-diamond line with its hash.
    """
    lines: List[str] = []
    for node in nodes:
        if node.is_folder_title():
            lines.append(FOLDER_RULE)
            lines.append(f"&#8756; {node.path}<br>")
            lines.append(FOLDER_RULE)
            lines.extend(render_tree_lines(node.children))
        elif node.is_summary:
            hash_line = f"{node.hash}<br>" if node.hash else ""
            lines.append(f"&#9830;&#9830; {node.path}<br>{hash_line}<br>")
        else:
            lines.append(f"&#9830; {node.path}<br>{node.hash}<br><br>")
    return lines


def render_hash_list(report: HashReport, settings: ReportSettings) -> str:
    """Render the "Hash Code List" document with the full entry tree."""
    roots = build_tree(report.file_hashes)
    body = [
        '<div class="div_subject">Hash Code List</div><br>',
        f'<div class="div_list">&#927; Product Name : <b>{settings.product_name}</b></div>',
        f'<div class="div_list">&#927; Applicant Co. : {settings.applicant_co}</div>',
        '<div class="div_list">&#927; Final Hash Code :</div>',
        f'<div class="div_hash_result_code2">{report.hash}</div>',
        f'<div class="div_list">&#927; {report.file_count} Files / {report.folder_count} Folders:</div><br>',
        '<div class="div_hash_code_list">',
    ]
    body.extend(render_tree_lines(roots))
    body.append("</div>")
    body.append(FOLDER_RULE * 2 + "<div>END.</div>" + FOLDER_RULE * 2)
    return _document(settings.test_report_no, body)


def render_hash_confirmation(report: HashReport, settings: ReportSettings) -> str:
    """Render the one-page "Confirmation of Hash Code" document."""
    body = [
        '<div class="div_subject">Confirmation of Hash Code</div><br><br>',
        f'<div class="div_list">&#927; Test Report No. : <span class="div_bold">{settings.test_report_no}</span></div>',
        f'<div class="div_list">&#927; Product Name : <span class="div_bold">{settings.product_name}</span></div>',
        f'<div class="div_list">&#927; Applicant Co. : {settings.applicant_co}</div>',
        f'<div class="div_list">&#927; CopyRight Co. : {settings.copyright_co}</div><br>',
        '<div class="div_list">&#927; Hash Result</div>',
        '<table class="table_hash_result">',
        "<tr><td><br>",
        "<div>&#9830; Final Hash Code : </div>",
        f'<div class="div_hash_result_code">{report.hash}</div><br>',
        f"<div>&#9830; Number of Files : {report.file_count} Files</div><br>",
        f"<div>&#9830; Hash Tool : {HASH_TOOL_NAME}</div><br>",
        f"<div>&#9830; Hash Algorithm : {settings.algorithm.label}</div><br>",
        "</td></tr>",
        "</table><br>",
        '<div class="div_list_descryption">&#927; The above hash code can be used for integrity '
        "validation of tested products. (Attachment: Hash code list of files)</div><br>",
        '<div class="div_list_descryption">&#927; For your notice products and documents '
        "submitted for testing have been discarded.</div><br><br>",
        f'<div class="div_date">{format_test_date(settings.test_date)}</div><br><br>',
        '<table class="table_tester">',
        f"<tr><td><div>Tester : {settings.lab_name}</div></td><td></td></tr>",
        f'<tr><td><div class="div_tester">{settings.tester_name}</div></td>'
        '<td><div class="div_tester_signiture">(Signature)</div></td></tr>',
        "</table>",
    ]
    return _document(settings.test_report_no, body)
