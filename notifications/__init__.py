"""
变更通知模块。
把实体变更事件包装成通知信封，异步分发给邮件和实时推送等订阅者。
"""
