from flask import Flask, request, jsonify
from flask_cors import CORS
import logging
from typing import Optional

import gemini_client
from config import Settings
from errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

# ================= CORS 配置 =================
CORS_METHODS = ["GET", "OPTIONS", "PATCH", "DELETE", "POST", "PUT"]
CORS_HEADERS = [
    "X-CSRF-Token", "X-Requested-With", "Accept", "Accept-Version",
    "Content-Length", "Content-MD5", "Content-Type", "Date", "X-Api-Version",
]
# ===========================================


def resolve_api_key(override: Optional[str], settings: Settings) -> str:
    """请求里带的 apiKey 优先，其次是服务端配置的 GOOGLE_API_KEY"""
    api_key = override or settings.google_api_key
    if not api_key:
        raise ConfigurationError("Server Configuration Error: API Key missing")
    return api_key


def create_app(settings: Optional[Settings] = None) -> Flask:
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    # 中文内容原样输出
    app.json.ensure_ascii = False

    # 允许所有域名跨域访问，包括错误响应和预检请求
    CORS(
        app,
        resources={r"/api/*": {"origins": "*"}},
        methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        send_wildcard=True,
    )

    @app.route('/', methods=['GET'])
    def health_check():
        return "Service is Running", 200

    # OPTIONS 由 Flask 自动应答: 200 + 空 body
    @app.route('/api/chat', methods=['POST'])
    def chat():
        req_data = request.get_json(silent=True)
        if not isinstance(req_data, dict):
            req_data = {}

        prompt = req_data.get('prompt')
        if not prompt:
            return jsonify({"error": "Prompt is required"}), 400

        try:
            api_key = resolve_api_key(req_data.get('apiKey'), settings)
            result = gemini_client.generate_content(
                prompt,
                api_key=api_key,
                model_name=req_data.get('modelName') or settings.model_name,
                system_instruction=req_data.get('systemInstruction'),
                timeout=settings.request_timeout,
                base_url=settings.gemini_api_base_url,
            )
        except ConfigurationError as e:
            logger.error(f"Configuration Error: {e}")
            return jsonify({"error": str(e)}), 500
        except UpstreamError as e:
            logger.error(f"AI Error: {e.message}")
            return jsonify({"error": e.message or "Internal Server Error"}), 500
        except Exception as e:
            logger.error(f"CRITICAL SERVER ERROR: {e}", exc_info=True)
            return jsonify({"error": str(e) or "Internal Server Error"}), 500

        return jsonify({"result": result}), 200

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"error": "Method Not Allowed"}), 405

    return app


def configure_logging(settings: Settings) -> None:
    # 打印到 stdout，部署平台的日志面板可见
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


runtime_settings = Settings.from_env()
configure_logging(runtime_settings)
app = create_app(runtime_settings)

if __name__ == '__main__':
    app.run(host=runtime_settings.host, port=runtime_settings.port, debug=runtime_settings.debug)
