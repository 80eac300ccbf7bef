#!/usr/bin/env python3
"""
Flask Web Application for the Timing Analyzer
Provides REST endpoints that merge uploaded contributor snapshots and return the report.
"""

import io
import os
import shutil
import tempfile

from flask import Flask, Response, jsonify, request
from werkzeug.utils import secure_filename

from timing_analyzer import TimingAnalyzer
from timing_analyzer.web import prepare_results

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 500 * 1024 * 1024

ALLOWED_EXTENSIONS = {'json'}


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def _form_flag(name, default):
    return request.form.get(name, default).lower() == 'true'


def _analyze_upload():
    """
    Save uploaded files to a scratch directory and run the analyzer on them.

    Returns:
        Tuple of (analyzer, error message or None)
    """
    files = [f for f in request.files.getlist('snapshots') if f.filename]
    if not files:
        return None, 'No snapshot files provided'

    stage_file = request.files.get('stages')
    if stage_file is not None and not stage_file.filename:
        stage_file = None

    for f in files + ([stage_file] if stage_file is not None else []):
        if not allowed_file(f.filename):
            return None, 'Invalid file type. Only JSON files are allowed.'

    analyzer = TimingAnalyzer(
        warn_on_dropped_nodes=_form_flag('warn_on_dropped_nodes', 'true')
    )

    upload_dir = tempfile.mkdtemp(prefix='timing_upload_')
    try:
        paths = []
        for position, f in enumerate(files):
            # Prefix keeps same-named uploads apart
            filepath = os.path.join(upload_dir, f"{position}_{secure_filename(f.filename)}")
            f.save(filepath)
            paths.append(filepath)
        analyzer.process_snapshot_files(paths)

        if stage_file is not None:
            stage_path = os.path.join(upload_dir, f"stages_{secure_filename(stage_file.filename)}")
            stage_file.save(stage_path)
            analyzer.process_stage_file(stage_path)
    finally:
        shutil.rmtree(upload_dir, ignore_errors=True)

    return analyzer, None


@app.route('/api/report', methods=['POST'])
def report_api():
    """
    API endpoint to build a report from snapshot files.
    Accepts: multipart/form-data with fields:
      - 'snapshots': one or more contributor snapshot JSON files
      - 'stages': stage timings JSON file (optional)
      - 'warn_on_dropped_nodes': 'true'|'false' (optional, default: 'true')
    Returns: JSON with the report tables
    """
    try:
        analyzer, error = _analyze_upload()
        if error:
            return jsonify({'error': error}), 400
        return jsonify(prepare_results(analyzer.build_report()))
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@app.route('/report', methods=['POST'])
def report_text():
    """
    Same input as /api/report.
    Returns: the rendered tables as plain text
    """
    try:
        analyzer, error = _analyze_upload()
        if error:
            return Response(error + '\n', status=400, mimetype='text/plain')
        out = io.StringIO()
        analyzer.render(out)
        return Response(out.getvalue(), mimetype='text/plain')
    except Exception as e:
        return Response(f'Error building report: {e}\n', status=500, mimetype='text/plain')


if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5001)
