"""
REST API for the TA lab scheduler.
Provides HTTP endpoints to schedule and validate in-memory data, and to run
file-based scheduling jobs.
"""
import os
import shutil
import uuid
import logging
import time
from threading import Thread
from typing import Any, Dict, List, Mapping, Optional

from flask import Flask, request, jsonify, send_file, abort
from flask_cors import CORS
from werkzeug.utils import secure_filename

from .config import AppSettings
from .data.converter import DataConverter
from .algorithms.greedy import schedule_assignments
from .algorithms.validation import validate_schedule
from .algorithms.prng import generate_seed
from .scheduler import ScheduleService

logger = logging.getLogger(__name__)

settings = AppSettings.from_env()

# Create Flask app
app = Flask(__name__)
CORS(app)  # Enable CORS for all routes

app.config['UPLOAD_FOLDER'] = settings.upload_folder
app.config['RESULTS_FOLDER'] = settings.results_folder
app.config['MAX_CONTENT_LENGTH'] = settings.max_content_length
app.config['DEFAULT_SEED'] = settings.default_seed

# Dictionary to store scheduling jobs
jobs: Dict[str, Dict[str, Any]] = {}

RESULT_FILES = {
    'assignments': 'Assignments.csv',
    'unassigned_labs': 'Unassigned_Labs.csv',
    'ta_schedule': 'TA_Schedule.csv',
    'ta_load_report': 'TA_Load_Report.csv'
}


def _json_payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        abort(400, description="Request body must be a JSON object")
    return payload


def _convert(records: Optional[List[Dict[str, Any]]], factory, label: str) -> list:
    if records is None:
        return []
    if not isinstance(records, list):
        abort(400, description=f"'{label}' must be a list")
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            abort(400, description=f"Invalid {label}: entry {index} must be an object")
    try:
        return [factory(record) for record in records]
    except (ValueError, KeyError, TypeError) as e:
        abort(400, description=f"Invalid {label}: {e}")


def _resolve_seed(value: Any) -> int:
    if value is None:
        default_seed = app.config.get('DEFAULT_SEED')
        return default_seed if default_seed is not None else generate_seed()
    try:
        return int(value)
    except (ValueError, TypeError):
        abort(400, description=f"Invalid seed: {value!r}")


@app.errorhandler(400)
@app.errorhandler(404)
def handle_client_error(error):
    return jsonify({'error': error.description}), error.code


@app.route('/api/v1/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'timestamp': time.time()
    })


@app.route('/api/v1/schedule', methods=['POST'])
def schedule():
    """Schedule labs and TAs posted as JSON and return the result."""
    payload = _json_payload()
    converter = DataConverter()

    labs = _convert(payload.get('labs'), converter.lab_from_record, 'labs')
    tas = _convert(payload.get('tas'), converter.ta_from_record, 'tas')
    locked = _convert(payload.get('locked_assignments'), converter.locked_assignment_from_record,
                      'locked_assignments')
    seed = _resolve_seed(payload.get('seed'))

    result = schedule_assignments(labs, tas, seed, locked)
    violations = validate_schedule(result.assignments, labs, tas)

    response = result.to_dict()
    response.update({
        'seed': seed,
        'violations': violations
    })
    return jsonify(response)


@app.route('/api/v1/validate', methods=['POST'])
def validate():
    """Validate a posted assignment list against labs and TAs."""
    payload = _json_payload()
    converter = DataConverter()

    assignments = _convert(payload.get('assignments'), converter.assignment_from_record, 'assignments')
    labs = _convert(payload.get('labs'), converter.lab_from_record, 'labs')
    tas = _convert(payload.get('tas'), converter.ta_from_record, 'tas')

    violations = validate_schedule(assignments, labs, tas)
    return jsonify({
        'valid': not violations,
        'violations': violations
    })


@app.route('/api/v1/jobs', methods=['GET'])
def list_jobs():
    """List scheduling jobs."""
    return jsonify({
        'jobs': list(jobs.values())
    })


@app.route('/api/v1/jobs/<job_id>', methods=['GET'])
def get_job(job_id):
    """Get details of a specific job."""
    if job_id not in jobs:
        abort(404, description=f"Job {job_id} not found")

    return jsonify(jobs[job_id])


@app.route('/api/v1/jobs/<job_id>/download/<file_type>', methods=['GET'])
def download_result(job_id, file_type):
    """Download a result file from a job."""
    if job_id not in jobs:
        abort(404, description=f"Job {job_id} not found")

    job = jobs[job_id]

    if job['status'] != 'completed':
        abort(400, description=f"Job {job_id} is not completed")

    if file_type not in RESULT_FILES:
        abort(400, description=f"Invalid file type: {file_type}")

    file_name = RESULT_FILES[file_type]
    file_path = os.path.join(job['output_dir'], file_name)

    if not os.path.exists(file_path):
        abort(404, description=f"File {file_name} not found")

    return send_file(file_path,
                     mimetype='text/csv',
                     as_attachment=True,
                     download_name=file_name)


def run_scheduling_job(job_id: str, input_dir: str, output_dir: str, seed: int):
    """Run a scheduling job in a separate thread."""
    try:
        jobs[job_id]['status'] = 'processing'

        service = ScheduleService(
            input_dir=input_dir,
            output_dir=output_dir,
            seed=seed
        )
        results = service.run()

        jobs[job_id].update({
            'status': 'completed' if results['success'] else 'failed',
            'results': results,
            'completed_at': time.time()
        })

        logger.info(f"Job {job_id} completed with status: {jobs[job_id]['status']}")

    except Exception as e:
        logger.error(f"Error in job {job_id}: {str(e)}")

        jobs[job_id].update({
            'status': 'failed',
            'error': str(e),
            'completed_at': time.time()
        })


@app.route('/api/v1/jobs', methods=['POST'])
def submit_job():
    """Submit a new file-based scheduling job."""
    if 'files' not in request.files:
        abort(400, description="No files provided")

    files = request.files.getlist('files')
    if not files:
        abort(400, description="No files selected")

    seed = _resolve_seed(request.form.get('seed'))

    job_id = str(uuid.uuid4())
    job_input_dir = os.path.join(app.config['UPLOAD_FOLDER'], job_id)
    job_output_dir = os.path.join(app.config['RESULTS_FOLDER'], job_id)

    os.makedirs(job_input_dir, exist_ok=True)
    os.makedirs(job_output_dir, exist_ok=True)

    saved_files = []
    for file in files:
        if file.filename:
            filename = secure_filename(file.filename)
            file_path = os.path.join(job_input_dir, filename)
            file.save(file_path)
            saved_files.append({
                'name': filename,
                'path': file_path
            })

    job = {
        'id': job_id,
        'status': 'pending',
        'seed': seed,
        'input_dir': job_input_dir,
        'output_dir': job_output_dir,
        'files': saved_files,
        'created_at': time.time(),
        'started_at': None,
        'completed_at': None
    }

    jobs[job_id] = job

    job['started_at'] = time.time()
    thread = Thread(target=run_scheduling_job,
                    args=(job_id, job_input_dir, job_output_dir, seed))
    thread.start()

    return jsonify({
        'job_id': job_id,
        'status': 'pending',
        'seed': seed,
        'message': 'Scheduling job submitted successfully'
    }), 202  # 202 Accepted


@app.route('/api/v1/jobs/<job_id>', methods=['DELETE'])
def delete_job(job_id):
    """Delete a job and its files."""
    if job_id not in jobs:
        abort(404, description=f"Job {job_id} not found")

    job = jobs[job_id]

    # Only allow deleting completed or failed jobs
    if job['status'] not in ['completed', 'failed']:
        abort(400, description=f"Cannot delete job {job_id} with status {job['status']}")

    if os.path.exists(job['input_dir']):
        shutil.rmtree(job['input_dir'])

    if os.path.exists(job['output_dir']):
        shutil.rmtree(job['output_dir'])

    del jobs[job_id]

    return jsonify({
        'message': f"Job {job_id} deleted successfully"
    })


def create_app():
    """Create the Flask application."""
    return app


if __name__ == '__main__':
    logging.basicConfig(level=settings.log_level,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    app.run(host=settings.host, port=settings.port)
