PUBLISH_MODE_HEADER = "publish-mode"
